"""Company profile attached to a Django user.

Users themselves are ``django.contrib.auth`` users whose username is
their e-mail address; staff users act as administrators.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel


class CompanyProfile(BaseModel):
    """Billing identity of the business behind an account."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="company_profile",
    )
    company_name = models.CharField(max_length=255, blank=True, default="")
    company_details = models.TextField(blank=True, default="")
    billing_address = models.TextField(blank=True, default="")

    class Meta:
        db_table = "company_profiles"

    def __str__(self) -> str:
        return self.company_name or f"profile of user {self.user_id}"
