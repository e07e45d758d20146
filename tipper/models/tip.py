from dataclasses import dataclass

from tipper.utils.validation import optional_field, require_field


def normalize_name(name):
    """Case-insensitive, whitespace-trimmed form used for every comparison"""
    return (name or "").strip().lower()


@dataclass(frozen=True)
class Tip:
    celebrity_name: str
    show_id: str
    created_at: float  # milliseconds since the epoch
    is_final: bool = False

    def __repr__(self):
        flag = " FINAL" if self.is_final else ""
        return f"<Tip {self.celebrity_name!r} show={self.show_id}{flag}>"

    def matches(self, celebrity_name):
        return normalize_name(self.celebrity_name) == normalize_name(celebrity_name)

    @classmethod
    def from_dict(cls, data):
        return cls(
            celebrity_name=require_field(data, "celebrityName", str, "tip"),
            show_id=require_field(data, "showId", str, "tip"),
            created_at=require_field(data, "createdAt", (int, float), "tip"),
            is_final=bool(optional_field(data, "isFinal", bool, "tip")),
        )

    def to_dict(self):
        data = {
            "celebrityName": self.celebrity_name,
            "showId": self.show_id,
            "createdAt": self.created_at,
        }
        if self.is_final:
            data["isFinal"] = True
        return data
