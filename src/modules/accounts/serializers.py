"""Account DRF serializers (read side)."""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.models import CompanyProfile
from modules.core.identity import Caller


class ProfileSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source="user.email", read_only=True)
    name = serializers.CharField(source="user.first_name", read_only=True)
    role = serializers.SerializerMethodField()

    class Meta:
        model = CompanyProfile
        fields = [
            "user_id",
            "email",
            "name",
            "role",
            "company_name",
            "company_details",
            "billing_address",
            "updated_at",
        ]
        read_only_fields = fields

    def get_role(self, obj: CompanyProfile) -> str:
        return str(Caller.from_user(obj.user).role)
