"""Account exceptions."""

from __future__ import annotations

from modules.core.exceptions import Conflict, NotFound, ValidationFailed


class EmailAlreadyRegistered(Conflict):
    """Another account already uses this e-mail address."""


class AccountNotFound(NotFound):
    """No account is registered under the e-mail address."""


class InvalidResetToken(ValidationFailed):
    """The password reset token is malformed, already used or expired."""
