"""Unit tests for cart, checkout and order API endpoints."""
import pytest

from quickbite.core.config import settings


async def add_items(client, *items):
    for menu_item_id, quantity in items:
        response = await client.post("/api/cart/items", json={"menu_item_id": menu_item_id, "quantity": quantity})
        assert response.status_code == 200
    return response.json()


async def place_order(client, payment_method="Cash"):
    await add_items(client, (1, 2), (5, 1))
    response = await client.post(
        "/api/cart/checkout",
        json={"payment_method": payment_method, "delivery_option": "Pickup"},
    )
    assert response.status_code == 201
    return response.json()


class TestCartAPI:
    """Test cart endpoints."""

    @pytest.mark.asyncio
    async def test_empty_cart_issues_cookie(self, client):
        response = await client.get("/api/cart")

        assert response.status_code == 200
        assert response.json() == {"items": [], "item_count": 0, "total": 0.0}
        assert "cart_id" in response.cookies

    @pytest.mark.asyncio
    async def test_guest_cannot_add(self, client):
        response = await client.post("/api/cart/items", json={"menu_item_id": 1})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_member_adds_items(self, member_client):
        cart = await add_items(member_client, (1, 2), (5, 1), (1, 1))

        assert cart["item_count"] == 4
        assert cart["total"] == pytest.approx(42.47)
        assert [(line["name"], line["quantity"]) for line in cart["items"]] == [
            ("Classic Burger", 3),
            ("Coca-Cola", 1),
        ]

    @pytest.mark.asyncio
    async def test_add_unknown_item(self, member_client):
        response = await member_client.post("/api/cart/items", json={"menu_item_id": 999})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_and_remove(self, member_client):
        await add_items(member_client, (1, 2), (5, 1))

        response = await member_client.patch("/api/cart/items/1", json={"quantity": 5})
        assert response.json()["item_count"] == 6

        response = await member_client.delete("/api/cart/items/5")
        assert [line["name"] for line in response.json()["items"]] == ["Classic Burger"]

        assert (await member_client.delete("/api/cart/items/5")).status_code == 404

        response = await member_client.delete("/api/cart")
        assert response.json()["items"] == []


class TestCheckoutAPI:
    """Test checkout and order endpoints."""

    @pytest.mark.asyncio
    async def test_checkout_creates_paid_order(self, member_client):
        order = await place_order(member_client)

        assert order["status"] == "Paid"
        assert order["payment_method"] == "Cash"
        assert order["total"] == pytest.approx(29.48)
        assert len(order["items"]) == 2

        cart = (await member_client.get("/api/cart")).json()
        assert cart["items"] == []

    @pytest.mark.asyncio
    async def test_checkout_empty_cart(self, member_client):
        response = await member_client.post("/api/cart/checkout", json={"payment_method": "Cash"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delivery_needs_address(self, member_client):
        await add_items(member_client, (1, 1))
        response = await member_client.post(
            "/api/cart/checkout",
            json={"payment_method": "Card", "delivery_option": "Delivery"},
        )
        assert response.status_code == 400
        assert "address" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_order_history(self, member_client):
        order = await place_order(member_client)

        response = await member_client.get("/api/orders/history")
        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [order["id"]]

        response = await member_client.get(f"/api/orders/{order['id']}")
        assert response.json()["total"] == pytest.approx(29.48)

    @pytest.mark.asyncio
    async def test_order_history_requires_login(self, client):
        assert (await client.get("/api/orders/history")).status_code == 401

    @pytest.mark.asyncio
    async def test_admin_updates_status(self, member_client):
        order = await place_order(member_client)

        # Switch the same client over to the admin account
        await member_client.post(
            "/api/auth/login",
            json={"email": settings.admin_email, "password": settings.admin_password},
        )

        history = (await member_client.get("/api/orders/history")).json()
        assert order["id"] in [o["id"] for o in history]

        response = await member_client.patch(f"/api/orders/{order['id']}/status", json={"status": "Preparing"})
        assert response.status_code == 200
        assert response.json()["status"] == "Preparing"
        assert response.json()["previous_status"] == "Paid"

        response = await member_client.patch(f"/api/orders/{order['id']}/status", json={"status": "Delivered"})
        assert response.status_code == 200

        response = await member_client.patch(f"/api/orders/{order['id']}/status", json={"status": "Refunded"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_member_cannot_update_status(self, member_client):
        order = await place_order(member_client)
        response = await member_client.patch(f"/api/orders/{order['id']}/status", json={"status": "Refunded"})
        assert response.status_code == 403
