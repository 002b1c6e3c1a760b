"""Integration tests for the order endpoints, from cart to settlement."""

from decimal import Decimal

import pytest
from freezegun import freeze_time

from modules.capacities.models import RouteCapacity
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.integration

ORDERS_URL = "/api/v1/orders/"


@pytest.fixture()
def order_payload(order_items):
    return {
        "items": [
            {**item, "route_id": str(item["route_id"]), "route_capacity_id": str(item["route_capacity_id"])}
            for item in order_items
        ]
    }


@pytest.fixture()
def placed_order(auth_client, order_payload):
    response = auth_client.post(ORDERS_URL, order_payload, format="json")
    assert response.status_code == 201
    return response.json()


def _error_code(response):
    return response.json()["errors"][0]["code"]


class TestCreateOrder:
    def test_unauthenticated(self, api_client, order_payload):
        response = api_client.post(ORDERS_URL, order_payload, format="json")
        assert response.status_code == 401

    def test_created_pending_with_price_snapshot(self, placed_order, user, ten_g):
        assert placed_order["status"] == "PENDING"
        assert placed_order["payment_status"] == "PENDING"
        assert placed_order["user_id"] == user.pk
        assert placed_order["total_amount"] == "300.00"
        assert placed_order["currency"] == "USD"
        assert placed_order["order_number"].startswith("ORD-")

        (item,) = placed_order["items"]
        assert item["quantity"] == 3
        assert item["unit_price"] == "100.00"
        assert item["total_price"] == "300.00"
        assert item["route"]["name"] == "NYC-LON-01"
        assert item["route"]["a_end"]["city"] == "New York"
        assert item["route_capacity"]["tier_label"] == "10G"

        ten_g.refresh_from_db()
        assert ten_g.available_units == 5

    def test_quantity_above_stock(self, auth_client, order_payload):
        order_payload["items"][0]["quantity"] = 6
        response = auth_client.post(ORDERS_URL, order_payload, format="json")
        assert response.status_code == 409
        assert _error_code(response) == "INSUFFICIENT_CAPACITY"
        assert not Order.objects.exists()

    def test_empty_items(self, auth_client):
        response = auth_client.post(ORDERS_URL, {"items": []}, format="json")
        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_zero_quantity(self, auth_client, order_payload):
        order_payload["items"][0]["quantity"] = 0
        response = auth_client.post(ORDERS_URL, order_payload, format="json")
        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "items.0.quantity"

    def test_quantity_above_line_limit(self, auth_client, order_payload):
        order_payload["items"][0]["quantity"] = 1001
        response = auth_client.post(ORDERS_URL, order_payload, format="json")
        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "items.0.quantity"

    def test_capacity_from_another_route(self, auth_client, order_payload, make_location, lon):
        from modules.routes.models import Route

        other = Route.objects.create(name="X-LON", a_end=make_location("X", "R", "C"), b_end=lon)
        order_payload["items"][0]["route_id"] = str(other.id)
        response = auth_client.post(ORDERS_URL, order_payload, format="json")
        assert response.status_code == 400
        assert _error_code(response) == "VALIDATION_ERROR"

    def test_unknown_capacity(self, auth_client, order_payload):
        order_payload["items"][0]["route_capacity_id"] = "00000000-0000-7000-8000-000000000000"
        response = auth_client.post(ORDERS_URL, order_payload, format="json")
        assert response.status_code == 404


class TestReadOrders:
    def test_owner_lists_own_orders_only(self, auth_client, other_client, placed_order):
        mine = auth_client.get(ORDERS_URL).json()
        theirs = other_client.get(ORDERS_URL).json()
        assert mine["count"] == 1
        assert mine["results"][0]["order_number"] == placed_order["order_number"]
        assert theirs["count"] == 0

    def test_retrieve_by_owner_and_admin(self, auth_client, admin_client, placed_order):
        url = f"{ORDERS_URL}{placed_order['id']}/"
        assert auth_client.get(url).status_code == 200
        assert admin_client.get(url).json()["items"][0]["quantity"] == 3

    def test_retrieve_by_stranger(self, other_client, placed_order):
        response = other_client.get(f"{ORDERS_URL}{placed_order['id']}/")
        assert response.status_code == 403
        assert _error_code(response) == "UNAUTHORIZED"

    def test_retrieve_unknown(self, auth_client):
        response = auth_client.get(f"{ORDERS_URL}not-a-uuid/")
        assert response.status_code == 404

    @pytest.mark.parametrize("path,client_fixture", [("", "auth_client"), ("all/", "admin_client")])
    def test_listings_carry_items_with_route_ends(self, request, placed_order, path, client_fixture):
        body = request.getfixturevalue(client_fixture).get(f"{ORDERS_URL}{path}").json()
        (item,) = body["results"][0]["items"]
        assert item["route"]["a_end"]["city"] == "New York"
        assert item["route"]["b_end"]["city"] == "London"
        assert item["route_capacity"]["tier"] == "TEN_G"
        assert "payment_reference" not in body["results"][0]

    def test_all_orders_requires_admin(self, auth_client):
        assert auth_client.get(f"{ORDERS_URL}all/").status_code == 403


class TestAdminListing:
    @pytest.fixture()
    def history(self, user, other_user, route, ten_g):
        def place(owner, quantity, status, when):
            with freeze_time(when):
                order = Order.objects.create(user=owner, status=status)
                OrderItem.objects.create(
                    order=order, route=route, route_capacity=ten_g, quantity=quantity, unit_price=Decimal("100.00")
                )
                order.total_amount = Decimal("100.00") * quantity
                order.save(update_fields=["total_amount"])
            return order

        return [
            place(user, 1, OrderStatus.PENDING, "2026-01-10"),
            place(user, 2, OrderStatus.CONFIRMED, "2026-02-10"),
            place(other_user, 4, OrderStatus.CANCELLED, "2026-03-10"),
        ]

    def test_newest_first(self, admin_client, history):
        body = admin_client.get(f"{ORDERS_URL}all/").json()
        assert body["count"] == 3
        assert [o["id"] for o in body["results"]] == [str(o.id) for o in reversed(history)]

    @pytest.mark.parametrize(
        "params,expected",
        [
            ({"status": "CONFIRMED"}, [1]),
            ({"min_total": "150"}, [2, 1]),
            ({"start_date": "2026-02-01", "end_date": "2026-02-28"}, [1]),
        ],
    )
    def test_filters(self, admin_client, history, params, expected):
        body = admin_client.get(f"{ORDERS_URL}all/", params).json()
        assert [o["id"] for o in body["results"]] == [str(history[i].id) for i in expected]

    def test_filter_by_user(self, admin_client, history, other_user):
        body = admin_client.get(f"{ORDERS_URL}all/", {"user": other_user.pk}).json()
        assert body["count"] == 1

    def test_ordering_by_total(self, admin_client, history):
        body = admin_client.get(f"{ORDERS_URL}all/", {"ordering": "total_amount"}).json()
        assert [o["total_amount"] for o in body["results"]] == ["100.00", "200.00", "400.00"]

    def test_pagination(self, admin_client, history):
        body = admin_client.get(f"{ORDERS_URL}all/", {"page_size": 2, "page": 2}).json()
        assert body["count"] == 3
        assert len(body["results"]) == 1
        assert body["next"] is None


class TestReplaceItems:
    def test_put_replaces_lines(self, auth_client, placed_order, route, hundred_g):
        payload = {"items": [{"route_id": str(route.id), "route_capacity_id": str(hundred_g.id), "quantity": 2}]}
        response = auth_client.put(f"{ORDERS_URL}{placed_order['id']}/", payload, format="json")
        assert response.status_code == 200
        body = response.json()
        assert body["total_amount"] == "1600.00"
        assert [i["route_capacity"]["tier"] for i in body["items"]] == ["HUNDRED_G"]

    def test_put_on_confirmed_order(self, auth_client, placed_order, order_payload):
        Order.objects.filter(id=placed_order["id"]).update(status=OrderStatus.CONFIRMED)
        response = auth_client.put(f"{ORDERS_URL}{placed_order['id']}/", order_payload, format="json")
        assert response.status_code == 409
        assert _error_code(response) == "ORDER_NOT_EDITABLE"

    def test_put_by_admin_is_refused(self, admin_client, placed_order, order_payload):
        response = admin_client.put(f"{ORDERS_URL}{placed_order['id']}/", order_payload, format="json")
        assert response.status_code == 403

    def test_duplicate_capacity_rejected(self, auth_client, placed_order, order_payload):
        payload = {"items": order_payload["items"] * 2}
        response = auth_client.put(f"{ORDERS_URL}{placed_order['id']}/", payload, format="json")
        assert response.status_code == 400


class TestPayment:
    def _pay(self, client, order_id, **body):
        return client.patch(f"{ORDERS_URL}{order_id}/payment/", body, format="json")

    def test_completed_confirms_and_takes_stock(self, auth_client, placed_order, ten_g):
        response = self._pay(auth_client, placed_order["id"], payment_status="COMPLETED", payment_reference="TXN-1")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "CONFIRMED"
        assert body["payment_status"] == "COMPLETED"
        assert body["payment_reference"] == "TXN-1"
        ten_g.refresh_from_db()
        assert ten_g.available_units == 2

    def test_settlement_shortfall_rolls_back(self, auth_client, placed_order, ten_g):
        RouteCapacity.objects.filter(id=ten_g.id).update(available_units=2)
        response = self._pay(auth_client, placed_order["id"], payment_status="COMPLETED")
        assert response.status_code == 409
        assert _error_code(response) == "INSUFFICIENT_CAPACITY_AT_SETTLEMENT"

        order = Order.objects.get(id=placed_order["id"])
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == "PENDING"
        ten_g.refresh_from_db()
        assert ten_g.available_units == 2

    def test_second_completion_refused(self, auth_client, placed_order, ten_g):
        self._pay(auth_client, placed_order["id"], payment_status="COMPLETED")
        response = self._pay(auth_client, placed_order["id"], payment_status="COMPLETED")
        assert response.status_code == 400
        ten_g.refresh_from_db()
        assert ten_g.available_units == 2

    def test_failed_payment_leaves_stock(self, auth_client, placed_order, ten_g):
        body = self._pay(auth_client, placed_order["id"], payment_status="FAILED").json()
        assert body["status"] == "PENDING"
        assert body["payment_status"] == "FAILED"
        ten_g.refresh_from_db()
        assert ten_g.available_units == 5

    def test_stranger_cannot_pay(self, other_client, placed_order):
        response = self._pay(other_client, placed_order["id"], payment_status="COMPLETED")
        assert response.status_code == 403

    def test_unknown_payment_status(self, auth_client, placed_order):
        response = self._pay(auth_client, placed_order["id"], payment_status="SETTLED")
        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "payment_status"


class TestCancelAndOverride:
    def test_owner_cancels(self, auth_client, placed_order):
        response = auth_client.post(f"{ORDERS_URL}{placed_order['id']}/cancel/")
        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"

    def test_cancel_twice(self, auth_client, placed_order):
        auth_client.post(f"{ORDERS_URL}{placed_order['id']}/cancel/")
        response = auth_client.post(f"{ORDERS_URL}{placed_order['id']}/cancel/")
        assert response.status_code == 409
        assert _error_code(response) == "ORDER_NOT_EDITABLE"

    def test_admin_cannot_cancel_for_user(self, admin_client, placed_order):
        response = admin_client.post(f"{ORDERS_URL}{placed_order['id']}/cancel/")
        assert response.status_code == 403

    def test_admin_status_override(self, admin_client, placed_order):
        response = admin_client.patch(
            f"{ORDERS_URL}{placed_order['id']}/status/", {"status": "ACTIVE"}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["status"] == "ACTIVE"

    def test_status_override_requires_admin(self, auth_client, placed_order):
        response = auth_client.patch(
            f"{ORDERS_URL}{placed_order['id']}/status/", {"status": "ACTIVE"}, format="json"
        )
        assert response.status_code == 403
