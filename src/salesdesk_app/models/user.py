"""User and identity models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    SALESPERSON = "salesperson"
    MANAGER = "manager"


@dataclass(frozen=True)
class Identity:
    """Authenticated identity delivered by the identity provider."""

    uid: str
    email: str
    display_name: str


@dataclass(frozen=True)
class User:
    """Application profile for an authenticated identity."""

    id: str
    email: str
    display_name: str
    role: Role = Role.SALESPERSON

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER
