from dataclasses import dataclass
from typing import Optional, Tuple

from tipper.exceptions import InvalidSnapshotError
from tipper.models.counter_bet import CounterBet
from tipper.models.mask import Mask
from tipper.models.show import Show
from tipper.utils.validation import optional_field, require_field, require_list


@dataclass(frozen=True)
class Season:
    id: str
    name: str
    player_ids: Tuple[str, ...] = ()
    masks: Tuple[Mask, ...] = ()
    shows: Tuple[Show, ...] = ()
    active_show_id: Optional[str] = None
    counter_bets: Tuple[CounterBet, ...] = ()
    image_url: Optional[str] = None

    def __repr__(self):
        return f"<Season {self.name}>"

    def get_show(self, show_id):
        for show in self.shows:
            if show.id == show_id:
                return show
        return None

    def get_mask(self, mask_id):
        for mask in self.masks:
            if mask.id == mask_id:
                return mask
        return None

    @property
    def active_show(self):
        return self.get_show(self.active_show_id) if self.active_show_id else None

    def counter_bets_for(self, mask_id):
        return [bet for bet in self.counter_bets if bet.mask_id == mask_id]

    def revealed_masks(self):
        """Masks that have a usable reveal and therefore count for scoring"""
        return [mask for mask in self.masks if mask.actual_celebrity]

    @classmethod
    def from_dict(cls, data):
        player_ids = require_list(data, "playerIds", "season")
        if not all(isinstance(pid, str) for pid in player_ids):
            raise InvalidSnapshotError("season.playerIds must only contain strings")

        active_show_id = data.get("activeShowId") if isinstance(data, dict) else None
        if active_show_id is not None and not isinstance(active_show_id, str):
            raise InvalidSnapshotError("season.activeShowId must be str or null")

        return cls(
            id=require_field(data, "id", str, "season"),
            name=require_field(data, "seasonName", str, "season"),
            player_ids=tuple(player_ids),
            masks=tuple(Mask.from_dict(m) for m in require_list(data, "masks", "season")),
            shows=tuple(Show.from_dict(s) for s in require_list(data, "shows", "season")),
            active_show_id=active_show_id,
            counter_bets=tuple(
                CounterBet.from_dict(cb)
                for cb in require_list(data, "counterBets", "season")
            ),
            image_url=optional_field(data, "imageUrl", str, "season"),
        )

    def to_dict(self):
        data = {
            "id": self.id,
            "seasonName": self.name,
            "playerIds": list(self.player_ids),
            "masks": [mask.to_dict() for mask in self.masks],
            "shows": [show.to_dict() for show in self.shows],
            "activeShowId": self.active_show_id,
            "counterBets": [bet.to_dict() for bet in self.counter_bets],
        }
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        return data
