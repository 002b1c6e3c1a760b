"""Account service layer: self-service registration, company profile and password reset."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.contrib.auth.tokens import PasswordResetTokenGenerator, default_token_generator
from django.db import transaction
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_decode, urlsafe_base64_encode

from modules.accounts.exceptions import (
    AccountNotFound,
    EmailAlreadyRegistered,
    InvalidResetToken,
)
from modules.accounts.models import CompanyProfile

if TYPE_CHECKING:
    from modules.accounts.dtos import (
        PasswordResetDTO,
        PasswordResetRequestDTO,
        RegisterDTO,
        UpdateProfileDTO,
    )
    from modules.accounts.repositories.interfaces import IAccountRepository
    from modules.core.identity import Caller

logger = structlog.get_logger(__name__)


class AccountService:
    def __init__(
        self,
        repository: IAccountRepository,
        token_generator: PasswordResetTokenGenerator = default_token_generator,
    ) -> None:
        self._repo = repository
        self._tokens = token_generator

    @transaction.atomic
    def register(self, dto: RegisterDTO) -> CompanyProfile:
        """Create a USER account and its company profile.

        Raises:
            EmailAlreadyRegistered: the e-mail address is taken.
        """
        log = logger.bind(email=dto.email)
        if self._repo.email_exists(dto.email):
            log.warning("account.duplicate_email")
            raise EmailAlreadyRegistered(f"User with email {dto.email} already exists.")

        user = self._repo.create_user(dto.email, dto.password, dto.name)
        profile = CompanyProfile(
            user=user,
            company_name=dto.company_name,
            company_details=dto.company_details,
            billing_address=dto.billing_address,
        )
        profile = self._repo.save(profile)
        log.info("account.registered", user_id=user.pk)
        return profile

    def get_profile(self, caller: Caller) -> CompanyProfile:
        return self._repo.get_profile_for_user(caller.user_id)

    @transaction.atomic
    def update_profile(self, caller: Caller, dto: UpdateProfileDTO) -> CompanyProfile:
        profile = self._repo.get_profile_for_user(caller.user_id)
        changes = dto.model_dump(exclude_none=True)
        if "name" in changes:
            profile.user.first_name = changes.pop("name")
        for field, value in changes.items():
            setattr(profile, field, value)
        profile = self._repo.save(profile)
        logger.info("account.profile_updated", user_id=caller.user_id)
        return profile

    # ------------------------------------------------------------------
    # Password reset (no e-mail delivery)
    # ------------------------------------------------------------------

    def request_password_reset(self, dto: PasswordResetRequestDTO) -> str:
        """Issue a one-time reset token for the account registered under the e-mail.

        The token expires after ``PASSWORD_RESET_TIMEOUT`` seconds and is
        invalidated by any password change.

        Raises:
            AccountNotFound: no active account uses the e-mail address.
        """
        user = self._repo.get_user_by_email(dto.email)
        if not user:
            logger.warning("account.password_reset_unknown_email")
            raise AccountNotFound("No user found with this email address.")

        uid = urlsafe_base64_encode(force_bytes(user.pk))
        logger.info("account.password_reset_requested", user_id=user.pk)
        return f"{uid}.{self._tokens.make_token(user)}"

    @transaction.atomic
    def reset_password(self, dto: PasswordResetDTO) -> None:
        """Set a new password using a token from ``request_password_reset``.

        Raises:
            InvalidResetToken: the token is malformed, already used or expired.
        """
        uid, _, token = dto.token.partition(".")
        try:
            user_id = urlsafe_base64_decode(uid).decode()
        except (ValueError, UnicodeDecodeError):
            user_id = None

        user = self._repo.get_user_by_id(user_id) if user_id else None
        if not user or not token or not self._tokens.check_token(user, token):
            logger.warning("account.password_reset_rejected")
            raise InvalidResetToken("Invalid or expired reset token.")

        self._repo.set_password(user, dto.new_password)
        logger.info("account.password_reset", user_id=user.pk)
