"""Chat assistant API endpoints."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from quickbite.api.auth import SessionUser, get_current_user, require_admin
from quickbite.core.dependencies import get_chat_handler
from quickbite.services.chat.handler import PRICE_EDIT_ACTION, ChatHandler
from quickbite.services.chat.models import ChatEvent, Role

router = APIRouter()
logger = logging.getLogger(__name__)


class ChatMessageRequest(BaseModel):
    """Chat message request model."""
    text: str = Field(max_length=2000)


class ImageUploadRequest(BaseModel):
    """Image reference (URL or data URL) to match against the menu."""
    image_url: str


class PriceConfirmRequest(BaseModel):
    """Admin confirmation of a proposed price edit."""
    action: str = PRICE_EDIT_ACTION
    item_name: str
    new_price: str


class ChatResponse(BaseModel):
    """Everything the assistant sent for one request, in order."""
    role: Role
    events: List[ChatEvent]


def _caller(user: Optional[SessionUser]):
    if user is None:
        return Role.GUEST, ""
    return user.role, user.email


@router.post("/api/chat/message", response_model=ChatResponse)
async def send_message(
    message: ChatMessageRequest,
    user: Optional[SessionUser] = Depends(get_current_user),
    handler: ChatHandler = Depends(get_chat_handler),
):
    """Send a chat message to the assistant."""
    role, user_identifier = _caller(user)
    await handler.handle_message(role, user_identifier, message.text)
    return ChatResponse(role=role, events=handler.channel.events)


@router.post("/api/chat/image", response_model=ChatResponse)
async def upload_image(
    upload: ImageUploadRequest,
    user: Optional[SessionUser] = Depends(get_current_user),
    handler: ChatHandler = Depends(get_chat_handler),
):
    """Suggest menu items that look like the uploaded food photo."""
    role, user_identifier = _caller(user)
    await handler.handle_image_upload(role, user_identifier, upload.image_url)
    return ChatResponse(role=role, events=handler.channel.events)


@router.post("/api/chat/confirm-price", response_model=ChatResponse)
async def confirm_price(
    confirmation: PriceConfirmRequest,
    admin: SessionUser = Depends(require_admin),
    handler: ChatHandler = Depends(get_chat_handler),
):
    """Commit a price edit the admin confirmed in the chat."""
    logger.info(f"[CHAT] {admin.email} confirmed {confirmation.action} for '{confirmation.item_name}'")
    await handler.confirm_price_edit(confirmation.item_name, confirmation.new_price, confirmation.action)
    return ChatResponse(role=admin.role, events=handler.channel.events)
