"""
Exception types for Mask Tipper
"""


class TipperError(Exception):
    """Base class for all application errors"""


class InvalidSnapshotError(TipperError, ValueError):
    """A season or player snapshot has the wrong shape"""


class UnknownPlayerError(TipperError, LookupError):
    """A season references a player id that is missing from the roster"""

    def __init__(self, player_id):
        super().__init__(f"Player {player_id!r} is not in the player roster")
        self.player_id = player_id


class SeasonRuleError(TipperError, ValueError):
    """An edit would break one of the game rules"""
