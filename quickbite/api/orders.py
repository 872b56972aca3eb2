"""Order history API endpoints."""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Request, HTTPException
from pydantic import BaseModel

from quickbite.api.auth import SessionUser, require_admin, require_user
from quickbite.core.dependencies import get_order_service
from quickbite.db.models import Order
from quickbite.services.chat.models import Role
from quickbite.services.persistence.orders import OrderPersistenceService


router = APIRouter()
logger = logging.getLogger(__name__)


class OrderItemResponse(BaseModel):
    """Order item response model."""
    id: int
    item_name: str
    quantity: int
    unit_price: float
    personalization: Optional[str] = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    """Order response model."""
    id: int
    status: str
    payment_method: str
    delivery_option: str
    delivery_address: Optional[str] = None
    delivery_instructions: Optional[str] = None
    status_change_count: int = 0
    previous_status: Optional[str] = None
    total: float
    created_at: str
    items: List[OrderItemResponse] = []

    class Config:
        from_attributes = True


class StatusUpdateRequest(BaseModel):
    status: str


def order_response(order: Order) -> OrderResponse:
    """Convert an order row (with items loaded) to its response model."""
    return OrderResponse(
        id=order.id,
        status=order.status,
        payment_method=order.payment_method,
        delivery_option=order.delivery_option,
        delivery_address=order.delivery_address,
        delivery_instructions=order.delivery_instructions,
        status_change_count=order.status_change_count or 0,
        previous_status=order.previous_status,
        total=float(order.total),
        created_at=order.created_at.isoformat() if order.created_at else "",
        items=[
            OrderItemResponse(
                id=item.id,
                item_name=item.item_name,
                quantity=item.quantity,
                unit_price=float(item.unit_price),
                personalization=item.personalization,
            )
            for item in order.items
        ],
    )


@router.get("/api/orders/history", response_model=List[OrderResponse])
async def get_order_history(
    request: Request,
    limit: int = 100,
    user: SessionUser = Depends(require_user),
    order_service: OrderPersistenceService = Depends(get_order_service),
):
    """Orders of the signed-in member, or all orders for an admin."""
    logger.info(
        f"[ORDERS HISTORY] Request received - limit: {limit}, role: {user.role.value}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    try:
        if user.role == Role.ADMIN:
            orders = await order_service.list_orders(limit)
        else:
            orders = await order_service.find_recent_orders(user.email, limit)
        logger.info(f"[ORDERS HISTORY] Found {len(orders)} orders")
        return [order_response(order) for order in orders]

    except Exception as e:
        logger.error(
            f"[ORDERS HISTORY] Error fetching order history - "
            f"limit: {limit}, Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error fetching order history: {str(e)}")


@router.get("/api/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    user: SessionUser = Depends(require_user),
    order_service: OrderPersistenceService = Depends(get_order_service),
):
    """A single order; members only see their own."""
    order = await order_service.get_order_by_id(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    if user.role != Role.ADMIN and order.member_id != user.user_id:
        raise HTTPException(status_code=403, detail="Not your order")
    return order_response(order)


@router.patch("/api/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    update: StatusUpdateRequest,
    admin: SessionUser = Depends(require_admin),
    order_service: OrderPersistenceService = Depends(get_order_service),
):
    """Move an order to a new status (admin only)."""
    if await order_service.get_order_by_id(order_id) is None:
        raise HTTPException(status_code=404, detail="Order not found")
    try:
        order = await order_service.update_status(order_id, update.status, admin.role.value)
    except ValueError as e:
        logger.info(f"[ORDERS] Status change rejected for order {order_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return order_response(order)
