from .counter_bet import CounterBet
from .mask import MAX_TIPS_PER_MASK, Mask, TipBook, TipSequence
from .player import Player
from .player_score import PlayerScore
from .season import Season
from .show import Show
from .tip import Tip, normalize_name

__all__ = [
    "Player",
    "Show",
    "Tip",
    "TipSequence",
    "TipBook",
    "Mask",
    "CounterBet",
    "Season",
    "PlayerScore",
    "MAX_TIPS_PER_MASK",
    "normalize_name",
]
