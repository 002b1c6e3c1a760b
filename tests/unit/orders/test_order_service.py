"""Unit tests for OrderService.

Covers:
- Creation: price snapshot, totals, no inventory change, item validation.
- Replace-all edit of PENDING orders and ownership.
- Payment settlement: decrement + CONFIRMED together, or nothing.
- The oversell window between ordering and settlement.
- Cancellation and the administrator status override.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.capacities.exceptions import RouteCapacityNotFound
from modules.capacities.models import RouteCapacity
from modules.orders.constants import OrderStatus, PaymentStatus
from modules.orders.dtos import (
    CreateOrderDTO,
    UpdateOrderDTO,
    UpdatePaymentDTO,
    UpdateStatusDTO,
)
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
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.unit


def _items(*lines):
    return [
        {"route_id": route_id, "route_capacity_id": capacity_id, "quantity": quantity}
        for route_id, capacity_id, quantity in lines
    ]


def _assert_total_consistent(order: Order) -> None:
    items = OrderItem.objects.filter(order=order)
    assert order.total_amount == sum(
        (item.quantity * item.unit_price for item in items), Decimal("0.00")
    )


@pytest.fixture()
def pending_order(order_service, caller, order_items):
    return order_service.create_order(caller, CreateOrderDTO(items=order_items))


# ---------------------------------------------------------------------------
# create_order
# ---------------------------------------------------------------------------


class TestCreateOrder:
    def test_creates_pending_order_with_snapshot_price(self, order_service, caller, order_items, ten_g):
        order = order_service.create_order(caller, CreateOrderDTO(items=order_items))

        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.PENDING
        assert order.user_id == caller.user_id
        assert order.currency == "USD"
        assert order.total_amount == Decimal("300.00")
        item = order.items.get()
        assert item.unit_price == Decimal("100.00")
        assert item.total_price == Decimal("300.00")
        _assert_total_consistent(order)

    def test_does_not_touch_inventory(self, order_service, caller, order_items, ten_g):
        order_service.create_order(caller, CreateOrderDTO(items=order_items))
        ten_g.refresh_from_db()
        assert ten_g.available_units == 5

    def test_sums_multiple_lines(self, order_service, caller, route, ten_g, hundred_g):
        dto = CreateOrderDTO(items=_items((route.id, ten_g.id, 2), (route.id, hundred_g.id, 1)))
        order = order_service.create_order(caller, dto)
        assert order.total_amount == Decimal("1000.00")
        assert order.items.count() == 2
        _assert_total_consistent(order)

    def test_order_number_format(self, pending_order):
        assert pending_order.order_number.startswith("ORD-")
        assert len(pending_order.order_number) == len("ORD-YYYYMMDD-XXXXXX")

    def test_insufficient_capacity(self, order_service, caller, route, ten_g):
        with pytest.raises(InsufficientCapacity) as exc_info:
            order_service.create_order(caller, CreateOrderDTO(items=_items((route.id, ten_g.id, 6))))
        assert exc_info.value.code == "INSUFFICIENT_CAPACITY"
        assert Order.objects.count() == 0

    def test_unknown_capacity(self, order_service, caller, route):
        with pytest.raises(RouteCapacityNotFound):
            order_service.create_order(caller, CreateOrderDTO(items=_items((route.id, uuid4(), 1))))

    def test_capacity_of_another_route(self, order_service, caller, ten_g, lon, nyc):
        from modules.routes.models import Route

        reverse = Route.objects.create(name="LON-NYC-01", a_end=lon, b_end=nyc)
        with pytest.raises(InvalidOrderItem):
            order_service.create_order(caller, CreateOrderDTO(items=_items((reverse.id, ten_g.id, 1))))

    def test_inactive_route_is_not_orderable(self, order_service, caller, route, ten_g):
        route.is_active = False
        route.save()
        with pytest.raises(RouteNotOrderable):
            order_service.create_order(caller, CreateOrderDTO(items=_items((route.id, ten_g.id, 1))))

    def test_failure_on_second_line_persists_nothing(self, order_service, caller, route, ten_g, hundred_g):
        dto = CreateOrderDTO(items=_items((route.id, ten_g.id, 1), (route.id, hundred_g.id, 3)))
        with pytest.raises(InsufficientCapacity):
            order_service.create_order(caller, dto)
        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_price_change_does_not_alter_existing_order(self, pending_order, ten_g):
        ten_g.price_per_unit = Decimal("999.00")
        ten_g.save()
        item = pending_order.items.get()
        item.refresh_from_db()
        assert item.unit_price == Decimal("100.00")


# ---------------------------------------------------------------------------
# update_order
# ---------------------------------------------------------------------------


class TestUpdateOrder:
    def test_replaces_items_and_reprices(self, order_service, caller, pending_order, route, ten_g, hundred_g):
        old_item_id = pending_order.items.get().id
        dto = UpdateOrderDTO(items=_items((route.id, hundred_g.id, 1)))

        order = order_service.update_order(caller, str(pending_order.id), dto)

        assert order.total_amount == Decimal("800.00")
        assert not OrderItem.objects.filter(id=old_item_id).exists()
        assert list(order.items.values_list("route_capacity_id", flat=True)) == [hundred_g.id]
        _assert_total_consistent(order)

    def test_only_owner_may_edit(self, order_service, other_caller, pending_order, route, hundred_g):
        with pytest.raises(OrderAccessDenied) as exc_info:
            order_service.update_order(
                other_caller, str(pending_order.id), UpdateOrderDTO(items=_items((route.id, hundred_g.id, 1)))
            )
        assert exc_info.value.code == "UNAUTHORIZED"

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.ACTIVE, OrderStatus.CANCELLED],
    )
    def test_non_pending_order_is_not_editable(self, order_service, caller, pending_order, route, hundred_g, status):
        Order.objects.filter(id=pending_order.id).update(status=status)
        item_before = pending_order.items.get()

        with pytest.raises(OrderNotEditable) as exc_info:
            order_service.update_order(
                caller, str(pending_order.id), UpdateOrderDTO(items=_items((route.id, hundred_g.id, 1)))
            )

        assert exc_info.value.code == "ORDER_NOT_EDITABLE"
        pending_order.refresh_from_db()
        assert pending_order.total_amount == Decimal("300.00")
        assert list(pending_order.items.all()) == [item_before]

    def test_failed_reprice_keeps_old_items(self, order_service, caller, pending_order, route, hundred_g):
        with pytest.raises(InsufficientCapacity):
            order_service.update_order(
                caller, str(pending_order.id), UpdateOrderDTO(items=_items((route.id, hundred_g.id, 5)))
            )
        pending_order.refresh_from_db()
        assert pending_order.items.count() == 1
        assert pending_order.total_amount == Decimal("300.00")

    def test_unknown_order(self, order_service, caller, route, ten_g):
        with pytest.raises(OrderNotFound):
            order_service.update_order(caller, str(uuid4()), UpdateOrderDTO(items=_items((route.id, ten_g.id, 1))))


# ---------------------------------------------------------------------------
# update_payment_status (settlement)
# ---------------------------------------------------------------------------


class TestPaymentSettlement:
    def test_completion_decrements_and_confirms(self, order_service, caller, pending_order, ten_g):
        order = order_service.update_payment_status(
            caller,
            str(pending_order.id),
            UpdatePaymentDTO(payment_status="COMPLETED", payment_reference="PAY-123"),
        )

        ten_g.refresh_from_db()
        assert ten_g.available_units == 2
        assert order.status == OrderStatus.CONFIRMED
        assert order.payment_status == PaymentStatus.COMPLETED
        assert order.payment_reference == "PAY-123"

    def test_decrement_leaves_pricing_timestamp(self, order_service, caller, pending_order, ten_g):
        before = RouteCapacity.objects.get(id=ten_g.id).updated_at
        order_service.update_payment_status(caller, str(pending_order.id), UpdatePaymentDTO(payment_status="COMPLETED"))
        assert RouteCapacity.objects.get(id=ten_g.id).updated_at == before

    def test_admin_may_settle(self, order_service, admin_caller, pending_order):
        order = order_service.update_payment_status(
            admin_caller, str(pending_order.id), UpdatePaymentDTO(payment_status="COMPLETED")
        )
        assert order.status == OrderStatus.CONFIRMED

    def test_stranger_may_not_settle(self, order_service, other_caller, pending_order, ten_g):
        with pytest.raises(OrderAccessDenied):
            order_service.update_payment_status(
                other_caller, str(pending_order.id), UpdatePaymentDTO(payment_status="COMPLETED")
            )
        ten_g.refresh_from_db()
        assert ten_g.available_units == 5

    def test_oversell_window_fails_at_settlement(self, order_service, caller, route, ten_g, pending_order):
        second = order_service.create_order(caller, CreateOrderDTO(items=_items((route.id, ten_g.id, 4))))
        order_service.update_payment_status(caller, str(pending_order.id), UpdatePaymentDTO(payment_status="COMPLETED"))

        with pytest.raises(InsufficientCapacityAtSettlement) as exc_info:
            order_service.update_payment_status(caller, str(second.id), UpdatePaymentDTO(payment_status="COMPLETED"))

        assert exc_info.value.code == "INSUFFICIENT_CAPACITY_AT_SETTLEMENT"
        ten_g.refresh_from_db()
        second.refresh_from_db()
        assert ten_g.available_units == 2
        assert second.status == OrderStatus.PENDING
        assert second.payment_status == PaymentStatus.PENDING

    def test_shortfall_on_one_line_rolls_back_all_lines(self, order_service, caller, route, ten_g, hundred_g):
        order = order_service.create_order(
            caller, CreateOrderDTO(items=_items((route.id, ten_g.id, 2), (route.id, hundred_g.id, 2)))
        )
        RouteCapacity.objects.filter(id=hundred_g.id).update(available_units=1)

        with pytest.raises(InsufficientCapacityAtSettlement):
            order_service.update_payment_status(caller, str(order.id), UpdatePaymentDTO(payment_status="COMPLETED"))

        ten_g.refresh_from_db()
        hundred_g.refresh_from_db()
        order.refresh_from_db()
        assert ten_g.available_units == 5
        assert hundred_g.available_units == 1
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.PENDING

    def test_cannot_complete_twice(self, order_service, caller, pending_order, ten_g):
        order_service.update_payment_status(caller, str(pending_order.id), UpdatePaymentDTO(payment_status="COMPLETED"))
        with pytest.raises(InvalidPaymentTransition):
            order_service.update_payment_status(caller, str(pending_order.id), UpdatePaymentDTO(payment_status="COMPLETED"))
        ten_g.refresh_from_db()
        assert ten_g.available_units == 2

    def test_failed_payment_keeps_inventory_and_status(self, order_service, caller, pending_order, ten_g):
        order = order_service.update_payment_status(caller, str(pending_order.id), UpdatePaymentDTO(payment_status="FAILED"))
        ten_g.refresh_from_db()
        assert order.payment_status == PaymentStatus.FAILED
        assert order.status == OrderStatus.PENDING
        assert ten_g.available_units == 5

    def test_refund_after_completion(self, order_service, caller, pending_order, ten_g):
        order_service.update_payment_status(caller, str(pending_order.id), UpdatePaymentDTO(payment_status="COMPLETED"))
        order = order_service.update_payment_status(caller, str(pending_order.id), UpdatePaymentDTO(payment_status="REFUNDED"))
        ten_g.refresh_from_db()
        assert order.payment_status == PaymentStatus.REFUNDED
        assert ten_g.available_units == 2

    def test_refund_requires_completion(self, order_service, caller, pending_order):
        with pytest.raises(InvalidPaymentTransition) as exc_info:
            order_service.update_payment_status(caller, str(pending_order.id), UpdatePaymentDTO(payment_status="REFUNDED"))
        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_completion_does_not_demote_advanced_status(self, order_service, caller, pending_order):
        Order.objects.filter(id=pending_order.id).update(status=OrderStatus.PROCESSING)
        order = order_service.update_payment_status(caller, str(pending_order.id), UpdatePaymentDTO(payment_status="COMPLETED"))
        assert order.status == OrderStatus.PROCESSING

    def test_reference_kept_when_not_supplied(self, order_service, caller, pending_order):
        Order.objects.filter(id=pending_order.id).update(payment_reference="EXISTING")
        order = order_service.update_payment_status(caller, str(pending_order.id), UpdatePaymentDTO(payment_status="FAILED"))
        assert order.payment_reference == "EXISTING"


# ---------------------------------------------------------------------------
# request_cancellation / update_status
# ---------------------------------------------------------------------------


class TestCancellation:
    def test_owner_cancels_active_order_without_restock(self, order_service, caller, admin_caller, pending_order, ten_g):
        order_service.update_payment_status(caller, str(pending_order.id), UpdatePaymentDTO(payment_status="COMPLETED"))
        order_service.update_status(admin_caller, str(pending_order.id), UpdateStatusDTO(status="ACTIVE"))

        order = order_service.request_cancellation(caller, str(pending_order.id))

        ten_g.refresh_from_db()
        assert order.status == OrderStatus.CANCELLED
        assert ten_g.available_units == 2

    def test_cancelling_twice_is_rejected(self, order_service, caller, pending_order):
        order_service.request_cancellation(caller, str(pending_order.id))
        with pytest.raises(OrderNotEditable):
            order_service.request_cancellation(caller, str(pending_order.id))

    def test_only_owner_may_cancel(self, order_service, other_caller, admin_caller, pending_order):
        with pytest.raises(OrderAccessDenied):
            order_service.request_cancellation(other_caller, str(pending_order.id))
        with pytest.raises(OrderAccessDenied):
            order_service.request_cancellation(admin_caller, str(pending_order.id))


class TestStatusOverride:
    def test_admin_sets_any_status(self, order_service, admin_caller, pending_order):
        order = order_service.update_status(admin_caller, str(pending_order.id), UpdateStatusDTO(status="ACTIVE"))
        assert order.status == OrderStatus.ACTIVE

    def test_admin_may_reopen_cancelled_order(self, order_service, caller, admin_caller, pending_order):
        order_service.request_cancellation(caller, str(pending_order.id))
        order = order_service.update_status(admin_caller, str(pending_order.id), UpdateStatusDTO(status="PENDING"))
        assert order.status == OrderStatus.PENDING

    def test_user_may_not_override(self, order_service, caller, pending_order):
        with pytest.raises(OrderAccessDenied):
            order_service.update_status(caller, str(pending_order.id), UpdateStatusDTO(status="ACTIVE"))


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestQueries:
    def test_get_order_owner_and_admin(self, order_service, caller, admin_caller, pending_order):
        assert order_service.get_order(caller, str(pending_order.id)).id == pending_order.id
        assert order_service.get_order(admin_caller, str(pending_order.id)).id == pending_order.id

    def test_get_order_stranger(self, order_service, other_caller, pending_order):
        with pytest.raises(OrderAccessDenied):
            order_service.get_order(other_caller, str(pending_order.id))

    def test_get_order_malformed_id(self, order_service, caller):
        with pytest.raises(OrderNotFound):
            order_service.get_order(caller, "not-a-uuid")

    def test_user_orders_newest_first(self, order_service, caller, other_caller, order_items):
        first = order_service.create_order(caller, CreateOrderDTO(items=order_items))
        second = order_service.create_order(caller, CreateOrderDTO(items=order_items))
        order_service.create_order(other_caller, CreateOrderDTO(items=order_items))

        orders = order_service.get_user_orders(caller)

        assert [o.id for o in orders] == [second.id, first.id]

    def test_all_orders_admin_only(self, order_service, caller, other_caller, admin_caller, order_items):
        order_service.create_order(caller, CreateOrderDTO(items=order_items))
        order_service.create_order(other_caller, CreateOrderDTO(items=order_items))

        assert order_service.get_all_orders(admin_caller).count() == 2
        with pytest.raises(OrderAccessDenied):
            order_service.get_all_orders(caller)
