"""Account API views: public registration, password reset and the caller's own profile."""

from __future__ import annotations

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.dtos import (
    PasswordResetDTO,
    PasswordResetRequestDTO,
    RegisterDTO,
    UpdateProfileDTO,
)
from modules.accounts.repositories.django_repository import AccountDjangoRepository
from modules.accounts.serializers import ProfileSerializer
from modules.accounts.services import AccountService
from modules.core.identity import Caller


class RegisterView(APIView):
    """POST /api/v1/auth/register/"""

    permission_classes = [AllowAny]
    authentication_classes: list = []
    throttle_scope = "registration"

    def post(self, request: Request) -> Response:
        dto = RegisterDTO.model_validate(request.data)
        profile = AccountService(AccountDjangoRepository()).register(dto)
        return Response(ProfileSerializer(profile).data, status=status.HTTP_201_CREATED)


class ProfileView(APIView):
    """GET / PATCH /api/v1/profile/"""

    permission_classes = [IsAuthenticated]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = AccountService(AccountDjangoRepository())

    def get(self, request: Request) -> Response:
        profile = self._service.get_profile(Caller.from_user(request.user))
        return Response(ProfileSerializer(profile).data)

    def patch(self, request: Request) -> Response:
        dto = UpdateProfileDTO.model_validate(request.data)
        profile = self._service.update_profile(Caller.from_user(request.user), dto)
        return Response(ProfileSerializer(profile).data)


class PasswordResetRequestView(APIView):
    """POST /api/v1/auth/password/forgot/

    No e-mail is sent.  The token is only echoed back when ``DEBUG`` is on.
    """

    permission_classes = [AllowAny]
    authentication_classes: list = []
    throttle_scope = "password_reset"

    def post(self, request: Request) -> Response:
        dto = PasswordResetRequestDTO.model_validate(request.data)
        token = AccountService(AccountDjangoRepository()).request_password_reset(dto)
        body = {"detail": "Password reset requested."}
        if settings.DEBUG:
            body["reset_token"] = token
        return Response(body)


class PasswordResetView(APIView):
    """POST /api/v1/auth/password/reset/"""

    permission_classes = [AllowAny]
    authentication_classes: list = []
    throttle_scope = "password_reset"

    def post(self, request: Request) -> Response:
        dto = PasswordResetDTO.model_validate(request.data)
        AccountService(AccountDjangoRepository()).reset_password(dto)
        return Response({"detail": "Password reset successfully."})
