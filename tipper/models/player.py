from dataclasses import dataclass
from typing import Optional

from tipper.utils.validation import optional_field, require_field


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    color: str
    image_url: Optional[str] = None

    def __repr__(self):
        return f"<Player {self.name}>"

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=require_field(data, "id", str, "player"),
            name=require_field(data, "name", str, "player"),
            color=require_field(data, "color", str, "player"),
            image_url=optional_field(data, "imageUrl", str, "player"),
        )

    def to_dict(self):
        data = {"id": self.id, "name": self.name, "color": self.color}
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        return data
