"""Order DTOs for the Service Layer.

Data transfer objects using Pydantic v2.
These are the contracts between the API layer and ``OrderService``.
DTOs are immutable (``frozen=True``).

- ``OrderItemDTO``: a single requested line (route, tier row, quantity).
- ``CreateOrderDTO`` / ``UpdateOrderDTO``: the full item set of an order.
- ``UpdateStatusDTO``: administrator status override.
- ``UpdatePaymentDTO``: payment step result.
"""

from __future__ import annotations

from enum import StrEnum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.orders.constants import MAX_ITEMS_PER_ORDER, MAX_QUANTITY_PER_ITEM


class OrderStatusEnum(StrEnum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"


class PaymentStatusEnum(StrEnum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class OrderItemDTO(BaseModel):
    """One requested line.  The price is resolved by the service."""

    model_config = ConfigDict(frozen=True)

    route_id: UUID
    route_capacity_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        if v > MAX_QUANTITY_PER_ITEM:
            raise ValueError(f"Quantity must not exceed {MAX_QUANTITY_PER_ITEM}.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Validates:
    - ``items`` must contain between one and ``MAX_ITEMS_PER_ORDER`` items.
    - A route capacity appears at most once.
    """

    model_config = ConfigDict(frozen=True)

    items: List[OrderItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(cls, v: List[OrderItemDTO]) -> List[OrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        if len(v) > MAX_ITEMS_PER_ORDER:
            raise ValueError(f"Order must not have more than {MAX_ITEMS_PER_ORDER} items.")
        return v

    @model_validator(mode="after")
    def no_duplicate_capacities(self):
        capacity_ids = [item.route_capacity_id for item in self.items]
        if len(capacity_ids) != len(set(capacity_ids)):
            raise ValueError(
                "Each route capacity may appear only once per order; "
                "combine the quantities instead."
            )
        return self


class UpdateOrderDTO(CreateOrderDTO):
    """Replacement item set for a pending order (full replace, not merge)."""


class UpdateStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: OrderStatusEnum


class UpdatePaymentDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    payment_status: PaymentStatusEnum
    payment_reference: Optional[str] = Field(default=None, max_length=255)
