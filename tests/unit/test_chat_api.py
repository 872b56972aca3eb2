"""Unit tests for chat API endpoints."""
import pytest

from quickbite.services.chat import composer as composer_module


def events_of(data, event_type):
    return [event for event in data["events"] if event["type"] == event_type]


class TestChatMessageAPI:
    """Test POST /api/chat/message per role."""

    @pytest.mark.asyncio
    async def test_guest_order_is_refused(self, client):
        response = await client.post("/api/chat/message", json={"text": "Add 2 Classic Burger to my cart"})

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "Guest"
        assert events_of(data, "reply")[0]["text"] == composer_module.GUEST_ORDER_REPLY
        assert "Create account" in events_of(data, "suggestions")[0]["suggestions"]

        cart = (await client.get("/api/cart")).json()
        assert cart["items"] == []

    @pytest.mark.asyncio
    async def test_member_order_fills_cart(self, member_client):
        response = await member_client.post("/api/chat/message", json={"text": "order 2 tiramisu and 1 coca-cola"})

        data = response.json()
        assert data["role"] == "Member"
        assert [line["name"] for line in events_of(data, "cart_update")[0]["items"]] == ["Tiramisu", "Coca-Cola"]

        cart = (await member_client.get("/api/cart")).json()
        assert cart["item_count"] == 3

    @pytest.mark.asyncio
    async def test_member_tracks_latest_order(self, member_client):
        await member_client.post("/api/cart/items", json={"menu_item_id": 1, "quantity": 1})
        order = (
            await member_client.post("/api/cart/checkout", json={"payment_method": "Cash", "delivery_option": "Pickup"})
        ).json()

        response = await member_client.post("/api/chat/message", json={"text": "where is my order?"})

        reply = events_of(response.json(), "reply")[0]["text"]
        assert reply.endswith(f"Your latest order #{order['id']} is currently Paid.")

    @pytest.mark.asyncio
    async def test_admin_price_edit_round_trip(self, admin_client):
        response = await admin_client.post(
            "/api/chat/message", json={"text": "Change the price of Tiramisu to RM 12"}
        )
        confirm = events_of(response.json(), "confirm_admin_action")[0]
        assert confirm["payload"] == {"action": "ModifyPrice", "item_name": "Tiramisu", "new_price": "12.00"}

        # Unchanged until confirmed
        assert (await admin_client.get("/api/menu/items/4")).json()["price"] == 10.99

        response = await admin_client.post("/api/chat/confirm-price", json=confirm["payload"])
        assert response.status_code == 200
        reply = events_of(response.json(), "reply")[0]["text"]
        assert reply == "Price of Tiramisu has been successfully updated to RM 12.00."

        assert (await admin_client.get("/api/menu/items/4")).json()["price"] == 12.0

    @pytest.mark.asyncio
    async def test_confirm_requires_admin(self, member_client):
        response = await member_client.post(
            "/api/chat/confirm-price",
            json={"action": "ModifyPrice", "item_name": "Tiramisu", "new_price": "1.00"},
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_message_too_long(self, client):
        response = await client.post("/api/chat/message", json={"text": "a" * 2001})
        assert response.status_code == 422


class TestChatImageAPI:
    @pytest.mark.asyncio
    async def test_image_suggestions(self, member_client, fake_vision_client):
        response = await member_client.post("/api/chat/image", json={"image_url": "https://example.com/cake.jpg"})

        data = response.json()
        assert fake_vision_client.calls == ["https://example.com/cake.jpg"]
        assert [item["name"] for item in events_of(data, "image_results")[0]["items"]] == ["Tiramisu"]
