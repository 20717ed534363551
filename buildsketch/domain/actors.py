"""Attribution for audit entries."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Actor:
    """Who made a change. Human actors carry the identity provider's id."""

    id: str | None
    display_name: str

    @classmethod
    def system(cls, display_name: str) -> "Actor":
        return cls(id=None, display_name=display_name)

    @property
    def is_system(self) -> bool:
        return self.id is None
