"""Order persistence service."""
import logging
from datetime import datetime
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from sqlalchemy.orm import selectinload

from quickbite.db.models import Order, OrderItem, User
from quickbite.services.cart.session_cart import CartLine

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ["Cash", "Card", "Online Banking"]
DELIVERY_OPTIONS = ["Delivery", "Pickup"]
ORDER_STATUSES = [
    "Paid",
    "Preparing",
    "Out for Delivery",
    "Ready for Pickup",
    "Delivered",
    "Declined",
    "Refunded",
]
FINAL_STATUSES = {"Refunded", "Delivered", "Declined", "Ready for Pickup"}
MAX_STATUS_CHANGES = 2


def can_modify_status(order: Order) -> bool:
    """An order's status can change at most twice and never once final."""
    return order.status_change_count < MAX_STATUS_CHANGES and order.status not in FINAL_STATUSES


class OrderPersistenceService:
    """Service for persisting order data."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_order_from_cart(
        self,
        member_id: int,
        lines: List[CartLine],
        payment_method: str,
        delivery_option: str = "Delivery",
        delivery_address: Optional[str] = None,
        delivery_instructions: Optional[str] = None,
    ) -> Order:
        """
        Create a paid order from cart lines.

        Payment is not processed; the chosen method is recorded and the order
        starts in the "Paid" status. Unit prices are copied from the cart.

        Raises:
            ValueError: empty cart, unknown payment method or delivery option,
                or a delivery order without an address
        """
        if not lines:
            raise ValueError("Cart is empty")
        if payment_method not in PAYMENT_METHODS:
            raise ValueError(f"Unsupported payment method '{payment_method}'")
        if delivery_option not in DELIVERY_OPTIONS:
            raise ValueError(f"Unsupported delivery option '{delivery_option}'")
        if delivery_option == "Delivery" and not (delivery_address or "").strip():
            raise ValueError("A delivery address is required for delivery orders")

        order = Order(
            member_id=member_id,
            status="Paid",
            payment_method=payment_method,
            delivery_option=delivery_option,
            delivery_address=delivery_address,
            delivery_instructions=delivery_instructions,
            items=[
                OrderItem(
                    menu_item_id=line.menu_item_id,
                    item_name=line.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    personalization=line.personalization or None,
                )
                for line in lines
            ],
        )
        self.db.add(order)
        await self.db.commit()
        logger.info(f"[ORDERS] Created order {order.id} for member {member_id} with {len(lines)} line(s)")
        return await self.get_order_by_id(order.id)

    async def get_order_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID with items."""
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .options(selectinload(Order.items), selectinload(Order.member))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_recent_orders(self, member_email: str, limit: int = 5) -> List[Order]:
        """Most recent orders of a member, newest first."""
        result = await self.db.execute(
            select(Order)
            .join(User, Order.member_id == User.id)
            .where(User.email == member_email.lower().strip())
            .options(selectinload(Order.items))
            .order_by(desc(Order.created_at), desc(Order.id))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_orders(self, limit: int = 100) -> List[Order]:
        """All orders, newest first."""
        result = await self.db.execute(
            select(Order)
            .options(selectinload(Order.items), selectinload(Order.member))
            .order_by(desc(Order.created_at), desc(Order.id))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def update_status(self, order_id: int, status: str, role: str) -> Order:
        """
        Move an order to a new status.

        Raises:
            ValueError: unknown order or status, or the order can no longer change
        """
        if status not in ORDER_STATUSES:
            raise ValueError(f"Unknown order status '{status}'")

        order = await self.get_order_by_id(order_id)
        if not order:
            raise ValueError(f"Order {order_id} not found")
        if not can_modify_status(order):
            raise ValueError(f"Order {order_id} can no longer change status (currently {order.status})")
        if order.status == status:
            return order

        order.previous_status = order.status
        order.status = status
        order.status_change_count += 1
        order.last_modified_by_role = role
        order.last_status_change_at = datetime.utcnow()
        await self.db.commit()
        logger.info(f"[ORDERS] Order {order_id}: {order.previous_status} -> {status} by {role}")
        return await self.get_order_by_id(order_id)
