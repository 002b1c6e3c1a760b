"""Account DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class RegisterDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(min_length=1, max_length=150)
    company_name: str = ""
    company_details: str = ""
    billing_address: str = ""

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be blank.")
        return v.strip()


class UpdateProfileDTO(BaseModel):
    """Partial update of the caller's own profile."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    company_name: Optional[str] = Field(default=None, max_length=255)
    company_details: Optional[str] = None
    billing_address: Optional[str] = None


class PasswordResetRequestDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class PasswordResetDTO(BaseModel):
    """``token`` is the opaque value handed out by the reset request."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)
