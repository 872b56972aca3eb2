"""FastAPI dependencies."""
from typing import Optional

from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from quickbite.core.config import settings
from quickbite.db.database import get_db
from quickbite.services.cart.session_cart import SessionCart, new_cart_id
from quickbite.services.chat.channel import BufferedChannel
from quickbite.services.chat.handler import ChatHandler
from quickbite.services.menu.repository import MenuRepository
from quickbite.services.menu.sql_menu import SqlMenuProvider
from quickbite.services.persistence.orders import OrderPersistenceService
from quickbite.services.vision.tagging import OpenAIVisionClient, VisionClient

CART_COOKIE = "cart_id"


def get_menu_repository(db: AsyncSession = Depends(get_db)) -> MenuRepository:
    """Get menu repository instance."""
    return MenuRepository(provider=SqlMenuProvider(db))


def get_order_service(db: AsyncSession = Depends(get_db)) -> OrderPersistenceService:
    return OrderPersistenceService(db)


def get_session_cart(request: Request, response: Response) -> SessionCart:
    """Cart bound to the cart_id cookie; a new cookie is issued on first use."""
    cart_id = request.cookies.get(CART_COOKIE)
    if not cart_id:
        cart_id = new_cart_id()
        response.set_cookie(key=CART_COOKIE, value=cart_id, httponly=True, samesite="lax")
    return SessionCart(cart_id)


def get_vision_client() -> Optional[VisionClient]:
    """OpenAI vision client, or None when no API key is configured."""
    if not settings.openai_api_key:
        return None
    return OpenAIVisionClient()


def get_chat_handler(
    menu_repository: MenuRepository = Depends(get_menu_repository),
    cart: SessionCart = Depends(get_session_cart),
    order_service: OrderPersistenceService = Depends(get_order_service),
    vision_client: Optional[VisionClient] = Depends(get_vision_client),
) -> ChatHandler:
    """Chat handler writing to a fresh buffered channel for this request."""
    return ChatHandler(
        menu_repository=menu_repository,
        channel=BufferedChannel(),
        cart=cart,
        order_service=order_service,
        vision_client=vision_client,
    )
