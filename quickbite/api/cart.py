"""Shopping cart and checkout API endpoints."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from quickbite.api.auth import SessionUser, require_member
from quickbite.api.orders import OrderResponse, order_response
from quickbite.core.dependencies import get_menu_repository, get_order_service, get_session_cart
from quickbite.services.cart.session_cart import SessionCart
from quickbite.services.menu.repository import MenuRepository
from quickbite.services.persistence.orders import OrderPersistenceService

router = APIRouter()
logger = logging.getLogger(__name__)


class CartLineResponse(BaseModel):
    menu_item_id: int
    name: str
    unit_price: float
    quantity: int
    personalization: str = ""
    line_total: float


class CartResponse(BaseModel):
    """Cart contents."""
    items: List[CartLineResponse]
    item_count: int
    total: float


class AddToCartRequest(BaseModel):
    menu_item_id: int
    quantity: int = Field(default=1, ge=1)
    personalization: str = ""


class UpdateQuantityRequest(BaseModel):
    quantity: int


class CheckoutRequest(BaseModel):
    """Checkout details; payment itself is not processed."""
    payment_method: str
    delivery_option: str = "Delivery"
    delivery_address: Optional[str] = None
    delivery_instructions: Optional[str] = None


def cart_response(cart: SessionCart) -> CartResponse:
    return CartResponse(
        items=[
            CartLineResponse(
                menu_item_id=line.menu_item_id,
                name=line.name,
                unit_price=float(line.unit_price),
                quantity=line.quantity,
                personalization=line.personalization,
                line_total=float(line.line_total),
            )
            for line in cart.items()
        ],
        item_count=cart.item_count(),
        total=float(cart.total()),
    )


@router.get("/api/cart", response_model=CartResponse)
async def get_cart(cart: SessionCart = Depends(get_session_cart)):
    return cart_response(cart)


@router.post("/api/cart/items", response_model=CartResponse)
async def add_to_cart(
    add: AddToCartRequest,
    member: SessionUser = Depends(require_member),
    cart: SessionCart = Depends(get_session_cart),
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Add a menu item to the cart (members only)."""
    item = await menu_repository.get_item_by_id(add.menu_item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Menu item not found")
    cart.add_to_cart(item, add.quantity, add.personalization)
    return cart_response(cart)


@router.patch("/api/cart/items/{menu_item_id}", response_model=CartResponse)
async def update_cart_item(
    menu_item_id: int,
    update: UpdateQuantityRequest,
    cart: SessionCart = Depends(get_session_cart),
):
    """Set an item's quantity; zero removes it."""
    if not any(line.menu_item_id == menu_item_id for line in cart.items()):
        raise HTTPException(status_code=404, detail="Item is not in the cart")
    cart.update_quantity(menu_item_id, update.quantity)
    return cart_response(cart)


@router.delete("/api/cart/items/{menu_item_id}", response_model=CartResponse)
async def remove_cart_item(menu_item_id: int, cart: SessionCart = Depends(get_session_cart)):
    if not cart.remove_from_cart(menu_item_id):
        raise HTTPException(status_code=404, detail="Item is not in the cart")
    return cart_response(cart)


@router.delete("/api/cart", response_model=CartResponse)
async def clear_cart(cart: SessionCart = Depends(get_session_cart)):
    cart.clear_cart()
    return cart_response(cart)


@router.post("/api/cart/checkout", response_model=OrderResponse, status_code=201)
async def checkout(
    checkout_req: CheckoutRequest,
    member: SessionUser = Depends(require_member),
    cart: SessionCart = Depends(get_session_cart),
    order_service: OrderPersistenceService = Depends(get_order_service),
):
    """Turn the cart into a paid order and empty the cart."""
    try:
        order = await order_service.create_order_from_cart(
            member.user_id,
            cart.items(),
            checkout_req.payment_method,
            delivery_option=checkout_req.delivery_option,
            delivery_address=checkout_req.delivery_address,
            delivery_instructions=checkout_req.delivery_instructions,
        )
    except ValueError as e:
        logger.info(f"[CART] Checkout rejected for {member.email}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    cart.clear_cart()
    return order_response(order)
