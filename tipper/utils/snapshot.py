"""
Loading helpers for exported app state

An export looks like {"players": [...], "seasons": [...]}. A single season
request looks like {"season": {...}, "players": [...]}.
"""

from tipper.exceptions import InvalidSnapshotError
from tipper.models import Player, Season
from tipper.utils.validation import require_list, require_mapping


def load_players(data):
    if not isinstance(data, list):
        raise InvalidSnapshotError("players must be a list")
    return tuple(Player.from_dict(p) for p in data)


def load_app_state(data):
    """
    Parse a full export.

    Returns:
        tuple: (players, seasons)
    """
    require_mapping(data, "app state")
    players = load_players(require_list(data, "players", "app state"))
    seasons = tuple(
        Season.from_dict(s) for s in require_list(data, "seasons", "app state")
    )
    return players, seasons


def load_season_request(data):
    """
    Parse a {"season": ..., "players": [...]} payload.

    Returns:
        tuple: (season, players)
    """
    require_mapping(data, "request")
    if "season" not in data:
        raise InvalidSnapshotError("request is missing 'season'")
    season = Season.from_dict(data["season"])
    players = load_players(require_list(data, "players", "request"))
    return season, players


def find_season(seasons, season_id):
    for season in seasons:
        if season.id == season_id:
            return season
    return None


def dump_app_state(players, seasons):
    return {
        "players": [player.to_dict() for player in players],
        "seasons": [season.to_dict() for season in seasons],
    }
