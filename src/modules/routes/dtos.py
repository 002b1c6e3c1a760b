"""Route DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.capacities.dtos import CapacityTierEnum


class RouteSearchDTO(BaseModel):
    """Criteria for the route search.

    Every supplied field narrows the result; omitted fields do not filter.
    A-end fields match the route's A end location, B-end fields its B end.
    """

    model_config = ConfigDict(frozen=True)

    a_end_region: Optional[str] = None
    a_end_city: Optional[str] = None
    a_end_id: Optional[UUID] = None
    b_end_region: Optional[str] = None
    b_end_city: Optional[str] = None
    b_end_id: Optional[UUID] = None
    tier: Optional[CapacityTierEnum] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_means_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CreateRouteDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    a_end_id: UUID
    b_end_id: UUID
    distance: Optional[Decimal] = Field(default=None, ge=0)
    is_visible: bool = True

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Route name must not be blank.")
        return v.strip()

    @model_validator(mode="after")
    def endpoints_must_differ(self) -> Self:
        if self.a_end_id == self.b_end_id:
            raise ValueError("A end and B end must be different locations.")
        return self


class UpdateRouteDTO(BaseModel):
    """Partial update; endpoint distinctness is checked by the service
    once the supplied fields are merged with the stored route."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    a_end_id: Optional[UUID] = None
    b_end_id: Optional[UUID] = None
    distance: Optional[Decimal] = Field(default=None, ge=0)
    is_visible: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Route name must not be blank.")
        return v.strip() if v is not None else v
