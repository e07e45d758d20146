from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional, Tuple

from tipper.exceptions import InvalidSnapshotError, SeasonRuleError
from tipper.models.tip import Tip, normalize_name
from tipper.utils.validation import optional_field, require_field

MAX_TIPS_PER_MASK = 3
# Only the first and second tip may be locked in as final
MAX_FINAL_POSITION = 1


@dataclass(frozen=True)
class TipSequence:
    """
    One player's tips for one mask, in submission order.

    States: empty -> 1 tip -> 2 tips -> 3 tips (full), or final-locked as
    soon as a final tip is appended at position 0 or 1. A locked sequence
    accepts no further tips and its final tip can never be removed.
    """

    tips: Tuple[Tip, ...] = ()

    def __len__(self):
        return len(self.tips)

    def __iter__(self):
        return iter(self.tips)

    def __bool__(self):
        return bool(self.tips)

    @property
    def last(self):
        return self.tips[-1] if self.tips else None

    @property
    def is_locked(self):
        return any(tip.is_final for tip in self.tips)

    @property
    def is_full(self):
        return len(self.tips) >= MAX_TIPS_PER_MASK

    @property
    def can_mark_final(self):
        return len(self.tips) <= MAX_FINAL_POSITION

    def at(self, index):
        """Tip at a positional index, or None when the index is out of range"""
        if 0 <= index < len(self.tips):
            return self.tips[index]
        return None

    def position_of(self, created_at):
        """Index of the first tip created at the given timestamp, -1 if none"""
        for index, tip in enumerate(self.tips):
            if tip.created_at == created_at:
                return index
        return -1

    def append(self, tip):
        if self.is_locked:
            raise SeasonRuleError(
                "A final tip was already submitted for this mask and cannot be changed"
            )
        if self.is_full:
            raise SeasonRuleError(
                f"Maximum of {MAX_TIPS_PER_MASK} tips reached for this player and mask"
            )
        if tip.is_final and not self.can_mark_final:
            raise SeasonRuleError("Only the first or second tip can be marked final")
        return TipSequence(self.tips + (tip,))

    def remove_last(self):
        if not self.tips:
            return self
        if self.tips[-1].is_final:
            raise SeasonRuleError("A final tip cannot be deleted")
        return TipSequence(self.tips[:-1])

    def without_show(self, show_id):
        return TipSequence(tuple(tip for tip in self.tips if tip.show_id != show_id))


EMPTY_SEQUENCE = TipSequence()


class TipBook(Mapping):
    """
    Player id -> TipSequence for a single mask.

    Keeps players in the order their first tip was recorded. Lookups for a
    player without tips return an empty sequence instead of failing.
    """

    def __init__(self, sequences=None):
        self._sequences = dict(sequences or {})

    def __getitem__(self, player_id):
        return self._sequences[player_id]

    def __iter__(self):
        return iter(self._sequences)

    def __len__(self):
        return len(self._sequences)

    def __repr__(self):
        counts = ", ".join(f"{pid}={len(seq)}" for pid, seq in self._sequences.items())
        return f"<TipBook {counts}>"

    def get(self, player_id, default=EMPTY_SEQUENCE):
        return self._sequences.get(player_id, default)

    def with_sequence(self, player_id, sequence):
        sequences = dict(self._sequences)
        sequences[player_id] = sequence
        return TipBook(sequences)

    def without_player(self, player_id):
        return TipBook(
            {pid: seq for pid, seq in self._sequences.items() if pid != player_id}
        )

    def without_show(self, show_id):
        return TipBook(
            {pid: seq.without_show(show_id) for pid, seq in self._sequences.items()}
        )

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise InvalidSnapshotError("mask.tips must be an object")
        sequences = {}
        for player_id, tips in data.items():
            if not isinstance(tips, list):
                raise InvalidSnapshotError(f"mask.tips[{player_id!r}] must be a list")
            # Stored data is trusted as-is; rules apply only to new tips
            sequences[player_id] = TipSequence(tuple(Tip.from_dict(t) for t in tips))
        return cls(sequences)

    def to_dict(self):
        return {
            player_id: [tip.to_dict() for tip in sequence]
            for player_id, sequence in self._sequences.items()
        }


@dataclass(frozen=True)
class Mask:
    id: str
    name: str
    tips: TipBook = field(default_factory=TipBook)
    is_revealed: bool = False
    revealed_celebrity: Optional[str] = None
    image_url: Optional[str] = None

    def __repr__(self):
        return f"<Mask {self.name}>"

    @property
    def actual_celebrity(self):
        """Normalized reveal, or None if the mask cannot be scored yet"""
        if not self.is_revealed:
            return None
        return normalize_name(self.revealed_celebrity) or None

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=require_field(data, "id", str, "mask"),
            name=require_field(data, "name", str, "mask"),
            tips=TipBook.from_dict(require_field(data, "tips", dict, "mask")),
            is_revealed=require_field(data, "isRevealed", bool, "mask"),
            revealed_celebrity=optional_field(data, "revealedCelebrity", str, "mask"),
            image_url=optional_field(data, "imageUrl", str, "mask"),
        )

    def to_dict(self):
        data = {
            "id": self.id,
            "name": self.name,
            "tips": self.tips.to_dict(),
            "isRevealed": self.is_revealed,
        }
        if self.revealed_celebrity is not None:
            data["revealedCelebrity"] = self.revealed_celebrity
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        return data
