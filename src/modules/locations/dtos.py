"""Location DTOs for the Service Layer.

Pydantic v2 contracts between the API layer and ``LocationService``.
DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

Latitude = Annotated[Decimal, Field(ge=-90, le=90)]
Longitude = Annotated[Decimal, Field(ge=-180, le=180)]


class LocationTypeEnum(StrEnum):
    """Framework-agnostic mirror of ``LocationType``."""

    POP = "POP"
    DC = "DC"
    CLS = "CLS"


class CreateLocationDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: LocationTypeEnum
    region: str
    city: str
    latitude: Latitude
    longitude: Longitude

    @field_validator("name", "region", "city")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Value must not be blank.")
        return v.strip()


class UpdateLocationDTO(BaseModel):
    """Partial update: only supplied fields change.

    Setting ``is_active=True`` is how an administrator reactivates a
    previously deactivated location.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    type: LocationTypeEnum | None = None
    region: str | None = None
    city: str | None = None
    latitude: Latitude | None = None
    longitude: Longitude | None = None
    is_active: bool | None = None

    @field_validator("name", "region", "city")
    @classmethod
    def must_not_be_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Value must not be blank.")
        return v.strip() if v is not None else v
