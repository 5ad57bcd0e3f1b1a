from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller identity extracted from JWT."""

    user_id: str
    username: str = ""
    display_name: str = ""

    @property
    def name(self) -> str:
        return self.display_name or self.username or self.user_id
