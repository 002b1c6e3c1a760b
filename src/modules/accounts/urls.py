"""Account URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.accounts.views import (
    PasswordResetRequestView,
    PasswordResetView,
    ProfileView,
    RegisterView,
)

urlpatterns = [
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/password/forgot/", PasswordResetRequestView.as_view(), name="password_forgot"),
    path("auth/password/reset/", PasswordResetView.as_view(), name="password_reset"),
    path("profile/", ProfileView.as_view(), name="profile"),
]
