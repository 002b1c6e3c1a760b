"""Django ORM implementation of the Account repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.accounts.models import CompanyProfile
from modules.accounts.repositories.interfaces import IAccountRepository

logger = structlog.get_logger(__name__)


class AccountDjangoRepository(IAccountRepository):
    """Concrete Account repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[CompanyProfile]:
        try:
            return CompanyProfile.objects.select_related("user").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[CompanyProfile]:
        queryset = CompanyProfile.objects.select_related("user")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: CompanyProfile) -> CompanyProfile:
        entity.user.save()
        entity.save()
        logger.info("profile.saved", user_id=entity.user_id)
        return entity

    def email_exists(self, email: str) -> bool:
        return get_user_model().objects.filter(email__iexact=email).exists()

    def create_user(self, email: str, password: str, name: str) -> Any:
        return get_user_model().objects.create_user(
            username=email,
            email=email,
            password=password,
            first_name=name,
        )

    def get_profile_for_user(self, user_id: int) -> CompanyProfile:
        profile, _ = CompanyProfile.objects.select_related("user").get_or_create(
            user_id=user_id
        )
        return profile

    def get_user_by_email(self, email: str) -> Optional[Any]:
        return (
            get_user_model().objects.filter(email__iexact=email, is_active=True).first()
        )

    def get_user_by_id(self, user_id: Any) -> Optional[Any]:
        try:
            return get_user_model().objects.filter(pk=user_id, is_active=True).first()
        except (ValueError, ValidationError):
            return None

    @transaction.atomic
    def set_password(self, user: Any, password: str) -> Any:
        user.set_password(password)
        user.save(update_fields=["password"])
        logger.info("account.password_saved", user_id=user.pk)
        return user
