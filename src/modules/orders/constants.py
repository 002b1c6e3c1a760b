"""Order domain constants.

Two independent axes: the fulfilment ``OrderStatus`` and the
``PaymentStatus``.  Only payment transitions are validated here; order
status moves through the payment settlement, the owner's cancellation
or an administrator override.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    CONFIRMED = "CONFIRMED", "Confirmed"
    PROCESSING = "PROCESSING", "Processing"
    ACTIVE = "ACTIVE", "Active"
    CANCELLED = "CANCELLED", "Cancelled"


class PaymentStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    COMPLETED = "COMPLETED", "Completed"
    FAILED = "FAILED", "Failed"
    REFUNDED = "REFUNDED", "Refunded"


PAYMENT_TRANSITIONS: dict[str, set[str]] = {
    PaymentStatus.PENDING: {PaymentStatus.COMPLETED, PaymentStatus.FAILED},
    PaymentStatus.COMPLETED: {PaymentStatus.REFUNDED},
    PaymentStatus.FAILED: set(),
    PaymentStatus.REFUNDED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.ACTIVE, OrderStatus.CANCELLED}

ORDER_NUMBER_MAX_RETRIES = 5

# Price per unit tops out below 10**10, so these bounds keep every total
# inside the 16 integer digits of the total columns.
MAX_QUANTITY_PER_ITEM = 1000
MAX_ITEMS_PER_ORDER = 100
