"""Caller identity handed from the API layer to the services.

The authentication backend (SimpleJWT) resolves ``request.user``; the
services never look at the request.  They receive a ``Caller`` and enforce
ownership and role rules themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Role(StrEnum):
    USER = "USER"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class Caller:
    """Authenticated principal for one request."""

    user_id: int
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def owns(self, owner_id: int) -> bool:
        return self.user_id == owner_id

    @classmethod
    def from_user(cls, user: Any) -> Caller:
        """Build a caller from a Django user; staff accounts act as administrators."""
        role = Role.ADMIN if getattr(user, "is_staff", False) else Role.USER
        return cls(user_id=user.pk, role=role)
