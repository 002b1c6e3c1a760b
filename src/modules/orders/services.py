"""Order service layer (Use Cases).

Orchestrates the order lifecycle: creation, full item replacement while
pending, the payment step with inventory settlement, cancellation and
the administrator status override.  All write operations are atomic;
the service defines the unit-of-work boundary.

Business rules enforced:
- Every item's capacity exists, belongs to the item's route, and the route
  is active; quantities are checked against ``available_units`` but
  nothing is reserved when ordering.
- Only the owner edits or cancels an order; only PENDING orders are
  editable and a CANCELLED order cannot be cancelled again.
- Completing payment decrements every item's capacity and promotes a
  PENDING order to CONFIRMED in one transaction.  Any shortfall rolls the
  whole settlement back.
- Payment moves PENDING -> COMPLETED | FAILED and COMPLETED -> REFUNDED
  only, so an order is settled at most once.
- Administrators may set any order status (unconstrained override).
- Cancellation never restocks inventory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

import structlog
from django.conf import settings
from django.db import transaction

from modules.capacities.exceptions import InsufficientAvailability, RouteCapacityNotFound
from modules.orders.constants import OrderStatus, PaymentStatus
from modules.orders.exceptions import (
    InsufficientCapacity,
    InsufficientCapacityAtSettlement,
    InvalidOrderItem,
    InvalidPaymentTransition,
    OrderAccessDenied,
    OrderNotEditable,
    OrderNotFound,
    RouteNotOrderable,
)

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.capacities.repositories.interfaces import IRouteCapacityRepository
    from modules.capacities.services import CapacityService
    from modules.core.identity import Caller
    from modules.orders.dtos import (
        CreateOrderDTO,
        OrderItemDTO,
        UpdateOrderDTO,
        UpdatePaymentDTO,
        UpdateStatusDTO,
    )
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and the capacity service via constructor
    injection (DIP).  Every operation takes the ``Caller`` and enforces
    ownership and role itself.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        capacity_repository: IRouteCapacityRepository,
        capacity_service: CapacityService,
    ) -> None:
        self._order_repo = order_repository
        self._capacity_repo = capacity_repository
        self._capacity_service = capacity_service

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _price_items(self, items: List[OrderItemDTO]) -> List[Dict[str, Any]]:
        """Validate requested lines and snapshot the current tier prices.

        Raises:
            RouteCapacityNotFound: a capacity does not exist.
            InvalidOrderItem: a capacity belongs to another route.
            RouteNotOrderable: the route has been deactivated.
            InsufficientCapacity: quantity exceeds the units available now.
        """
        priced = []
        for item in items:
            capacity = self._capacity_repo.get_by_id(str(item.route_capacity_id))
            if not capacity:
                raise RouteCapacityNotFound(
                    f"Route capacity {item.route_capacity_id} not found."
                )
            if capacity.route_id != item.route_id:
                raise InvalidOrderItem(
                    f"Route capacity {capacity.id} does not belong to route {item.route_id}."
                )
            if not capacity.route.is_orderable:
                raise RouteNotOrderable(f"Route {item.route_id} is no longer available.")
            if capacity.available_units < item.quantity:
                raise InsufficientCapacity(
                    f"Route capacity {capacity.id}: requested {item.quantity}, "
                    f"available {capacity.available_units}."
                )
            priced.append(
                {
                    "route_id": capacity.route_id,
                    "route_capacity_id": capacity.id,
                    "quantity": item.quantity,
                    "unit_price": capacity.price_per_unit,
                }
            )
        return priced

    def _locked_order(self, order_id: str) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    @staticmethod
    def _require_owner(caller: Caller, order: Order) -> None:
        if not caller.owns(order.user_id):
            raise OrderAccessDenied(f"Order {order.id} belongs to another user.")

    @staticmethod
    def _require_owner_or_admin(caller: Caller, order: Order) -> None:
        if not (caller.is_admin or caller.owns(order.user_id)):
            raise OrderAccessDenied(f"Order {order.id} belongs to another user.")

    @staticmethod
    def _require_admin(caller: Caller) -> None:
        if not caller.is_admin:
            raise OrderAccessDenied("Administrator role required.")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, caller: Caller, dto: CreateOrderDTO) -> Order:
        """Create a PENDING/PENDING order priced at today's tier prices.

        Inventory is checked but not touched: units are only taken when
        payment completes.
        """
        log = logger.bind(user_id=caller.user_id)
        log.info("order.creation_started", item_count=len(dto.items))

        priced = self._price_items(dto.items)
        order = self._order_repo.create(
            {
                "user_id": caller.user_id,
                "currency": settings.ORDER_CURRENCY,
                "items": priced,
            }
        )

        log.info("order.created", order_id=str(order.id), total=str(order.total_amount))
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_order(self, caller: Caller, order_id: str, dto: UpdateOrderDTO) -> Order:
        """Replace every item of a pending order and re-price it.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: caller does not own the order.
            OrderNotEditable: order is no longer PENDING.
        """
        order = self._locked_order(order_id)
        self._require_owner(caller, order)
        log = logger.bind(order_id=str(order.id), user_id=caller.user_id)

        if not order.is_editable:
            log.warning("order.not_editable", status=order.status)
            raise OrderNotEditable(
                f"Order {order.order_number} is {order.status}; only PENDING orders can be edited."
            )

        priced = self._price_items(dto.items)
        self._order_repo.replace_items(order, priced)

        log.info("order.updated", total=str(order.total_amount))
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_status(self, caller: Caller, order_id: str, dto: UpdateStatusDTO) -> Order:
        """Administrator override: set any status, bypassing the lifecycle."""
        self._require_admin(caller)
        order = self._locked_order(order_id)
        log = logger.bind(
            order_id=str(order.id),
            user_id=caller.user_id,
            current_status=order.status,
            new_status=str(dto.status),
        )
        if order.is_terminal:
            log.warning("order.terminal_status_overridden")

        order.status = str(dto.status)
        self._order_repo.save(order)
        log.info("order.status_updated")
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_payment_status(
        self, caller: Caller, order_id: str, dto: UpdatePaymentDTO
    ) -> Order:
        """Record the outcome of the payment step.

        On COMPLETED every item's capacity is decremented (in capacity id
        order, so concurrent settlements lock rows consistently) and a
        PENDING order becomes CONFIRMED.  All of it commits together or
        not at all.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: caller is neither owner nor administrator.
            InvalidPaymentTransition: the payment status cannot move there.
            InsufficientCapacityAtSettlement: a tier ran out since ordering.
        """
        order = self._locked_order(order_id)
        self._require_owner_or_admin(caller, order)
        new_status = str(dto.payment_status)
        log = logger.bind(
            order_id=str(order.id),
            user_id=caller.user_id,
            current_payment_status=order.payment_status,
            new_payment_status=new_status,
        )

        if not order.can_transition_payment_to(new_status):
            log.warning("order.invalid_payment_transition")
            raise InvalidPaymentTransition(
                f"Cannot move payment from {order.payment_status} to {new_status}."
            )

        if new_status == PaymentStatus.COMPLETED:
            items = sorted(order.items.all(), key=lambda i: str(i.route_capacity_id))
            for item in items:
                try:
                    self._capacity_service.decrement_availability(
                        str(item.route_capacity_id), item.quantity
                    )
                except InsufficientAvailability as exc:
                    log.warning(
                        "order.settlement_failed",
                        capacity_id=str(item.route_capacity_id),
                    )
                    raise InsufficientCapacityAtSettlement(
                        f"Order {order.order_number}: {exc}"
                    ) from exc
            if order.status == OrderStatus.PENDING:
                order.status = OrderStatus.CONFIRMED

        order.payment_status = new_status
        if dto.payment_reference:
            order.payment_reference = dto.payment_reference
        self._order_repo.save(order)

        log.info("order.payment_updated", status=order.status)
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def request_cancellation(self, caller: Caller, order_id: str) -> Order:
        """Owner cancels the order.  Units already taken are not returned.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: caller does not own the order.
            OrderNotEditable: order is already CANCELLED.
        """
        order = self._locked_order(order_id)
        self._require_owner(caller, order)
        log = logger.bind(order_id=str(order.id), user_id=caller.user_id)

        if order.status == OrderStatus.CANCELLED:
            log.warning("order.already_cancelled")
            raise OrderNotEditable(f"Order {order.order_number} is already cancelled.")

        previous = order.status
        order.status = OrderStatus.CANCELLED
        self._order_repo.save(order)
        log.info("order.cancelled", previous_status=previous)
        return self._order_repo.get_by_id(str(order.id)) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, caller: Caller, order_id: str) -> Order:
        """Retrieve a single order with items, routes and tiers.

        Raises:
            OrderNotFound: if the order does not exist.
            OrderAccessDenied: caller is neither owner nor administrator.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        self._require_owner_or_admin(caller, order)
        return order

    def get_user_orders(self, caller: Caller) -> List[Order]:
        return self._order_repo.list_for_user(caller.user_id)

    def get_all_orders(self, caller: Caller) -> QuerySet:
        """Every order, newest first, as a lazy queryset (administrators only)."""
        self._require_admin(caller)
        return self._order_repo.query()
