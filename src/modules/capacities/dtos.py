"""Capacity DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

Price = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]
Units = Annotated[int, Field(ge=0)]


class CapacityTierEnum(StrEnum):
    """Framework-agnostic mirror of ``CapacityTier``."""

    TEN_G = "TEN_G"
    HUNDRED_G = "HUNDRED_G"
    FOUR_HUNDRED_G = "FOUR_HUNDRED_G"


class CapacityPricingDTO(BaseModel):
    """Absolute price and stock for one tier of a route."""

    model_config = ConfigDict(frozen=True)

    tier: CapacityTierEnum
    price_per_unit: Price
    available_units: Units


class UpsertPricingDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    tiers: List[CapacityPricingDTO]

    @field_validator("tiers")
    @classmethod
    def tiers_must_not_be_empty(cls, v: List[CapacityPricingDTO]) -> List[CapacityPricingDTO]:
        if not v:
            raise ValueError("At least one tier is required.")
        return v


class CreateCapacityDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    route_id: UUID
    tier: CapacityTierEnum
    price_per_unit: Price
    available_units: Units = 0


class UpdateCapacityDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    price_per_unit: Optional[Price] = None
    available_units: Optional[Units] = None
