from dataclasses import dataclass

from tipper.utils.validation import require_field, require_integer


@dataclass(frozen=True)
class CounterBet:
    """
    A wager that a specific tip is wrong.

    target_tip_index is a positional snapshot into the target's tip sequence
    taken when the bet was placed. If that tip (or either show) disappears
    later the bet simply stops counting.
    """

    id: str
    show_id: str
    mask_id: str
    bettor_player_id: str
    target_player_id: str
    target_tip_index: int

    def __repr__(self):
        return (
            f"<CounterBet {self.bettor_player_id} vs {self.target_player_id} "
            f"mask={self.mask_id} tip={self.target_tip_index}>"
        )

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=require_field(data, "id", str, "counterBet"),
            show_id=require_field(data, "showId", str, "counterBet"),
            mask_id=require_field(data, "maskId", str, "counterBet"),
            bettor_player_id=require_field(data, "bettorPlayerId", str, "counterBet"),
            target_player_id=require_field(data, "targetPlayerId", str, "counterBet"),
            target_tip_index=require_integer(data, "targetTipIndex", "counterBet"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "showId": self.show_id,
            "maskId": self.mask_id,
            "bettorPlayerId": self.bettor_player_id,
            "targetPlayerId": self.target_player_id,
            "targetTipIndex": self.target_tip_index,
        }
