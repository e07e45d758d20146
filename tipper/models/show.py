from dataclasses import dataclass

from tipper.utils.validation import require_field, require_integer


@dataclass(frozen=True)
class Show:
    """A single episode of the season. Episode numbers are the time axis."""

    id: str
    name: str
    episode_number: int

    def __repr__(self):
        return f"<Show {self.episode_number}: {self.name}>"

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=require_field(data, "id", str, "show"),
            name=require_field(data, "name", str, "show"),
            episode_number=require_integer(data, "episodeNumber", "show"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "episodeNumber": self.episode_number,
        }
