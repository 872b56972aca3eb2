"""Chat models."""
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field

from quickbite.services.menu.base import MenuItem


class Role(str, Enum):
    """Who is talking to the assistant."""

    GUEST = "Guest"
    MEMBER = "Member"
    ADMIN = "Admin"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Optional[str]) -> "Role":
        """Parse a role name; anything unknown is treated as a guest."""
        for role in cls:
            if value and role.value.lower() == value.lower():
                return role
        return cls.GUEST


class Intent(str, Enum):
    """Discrete purpose of a chat message."""

    GREETING = "Greeting"
    FAREWELL = "Farewell"
    THANKS = "Thanks"
    COMPLIMENT = "Compliment"
    COMPLAINT = "Complaint"
    AI_QUESTION = "AIQuestion"
    JOKE_REQUEST = "JokeRequest"
    HELP_REQUEST = "HelpRequest"
    WEATHER_TIME_QUERY = "WeatherTimeQuery"
    CONFUSION = "Confusion"
    ORDER_REQUEST = "OrderRequest"
    ADMIN_PRICE_EDIT = "AdminPriceEdit"
    NONE = "None"

    def __str__(self) -> str:
        return self.value


class ExtractedOrderItem(BaseModel):
    """Item name and quantity parsed out of free text."""

    name: str
    quantity: int = Field(default=1, ge=1)


class PriceEditRequest(BaseModel):
    """Admin request to change the price of a menu item."""

    item_name: str
    new_price: Decimal = Field(gt=0)


class ResolvedOrderLine(BaseModel):
    """Extracted item matched to a catalog entry."""

    menu_item: MenuItem
    quantity: int = Field(default=1, ge=1)


class OrderExtraction(BaseModel):
    """Outcome of extracting and resolving an order phrase."""

    requested: List[ExtractedOrderItem] = []
    resolved: List[ResolvedOrderLine] = []
    missing: List[str] = []

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.resolved)


class PriceEditExtraction(BaseModel):
    """Outcome of extracting a price edit and looking up its item."""

    request: PriceEditRequest
    menu_item: Optional[MenuItem] = None


class OrderSnapshot(BaseModel):
    """Status of a member's order as reported in chat."""

    id: int
    status: str


class ChatReply(BaseModel):
    """Reply text with the suggestion chips shown under it."""

    text: str
    suggestions: List[str] = []


class ChatEvent(BaseModel):
    """One outbound event emitted to the chat client."""

    type: str  # reply, suggestions, confirm_admin_action, cart_update, image_results
    text: Optional[str] = None
    suggestions: Optional[List[str]] = None
    payload: Optional[Dict[str, Any]] = None
    items: Optional[List[Dict[str, Any]]] = None
