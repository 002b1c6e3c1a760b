"""Account repository interface.

The managed entity is the ``CompanyProfile``; user rows are created and
looked up alongside it.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.accounts.models import CompanyProfile


class IAccountRepository(IRepository["CompanyProfile"]):
    """Repository contract for accounts."""

    @abstractmethod
    def email_exists(self, email: str) -> bool:
        """Whether a user already registered *email* (case-insensitive)."""

    @abstractmethod
    def create_user(self, email: str, password: str, name: str) -> Any:
        """Create a non-staff user with a hashed password."""

    @abstractmethod
    def get_profile_for_user(self, user_id: int) -> CompanyProfile:
        """The user's profile, created empty on first access."""

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[Any]:
        """Active user registered under *email* (case-insensitive), or ``None``."""

    @abstractmethod
    def get_user_by_id(self, user_id: Any) -> Optional[Any]:
        """Active user with primary key *user_id*, or ``None``."""

    @abstractmethod
    def set_password(self, user: Any, password: str) -> Any:
        """Hash and store a new password for *user*."""
