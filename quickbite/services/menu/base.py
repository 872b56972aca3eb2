"""Menu provider interface."""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel


class MenuItem(BaseModel):
    """Menu item model."""

    id: int
    name: str
    description: str = ""
    price: Decimal
    category: Optional[str] = None
    photo_url: Optional[str] = None


class Menu(BaseModel):
    """Menu model."""

    items: List[MenuItem]
    categories: List[str] = []


class MenuProvider(ABC):
    """Abstract base class for menu catalogs.

    Providers return items in catalog order so that substring lookups are
    deterministic: the first item in that order wins.
    """

    @abstractmethod
    async def list_menu_items(self) -> List[MenuItem]:
        """List all menu items in catalog order."""
        pass

    @abstractmethod
    async def list_categories(self) -> List[str]:
        """List category names."""
        pass

    @abstractmethod
    async def find_menu_item_by_exact_name(self, name: str) -> Optional[MenuItem]:
        """Find an item whose name equals `name`, ignoring case."""
        pass

    @abstractmethod
    async def find_menu_item_by_substring(self, name: str) -> Optional[MenuItem]:
        """Find the first item whose name contains `name` or is contained in it."""
        pass

    @abstractmethod
    async def get_item_by_id(self, item_id: int) -> Optional[MenuItem]:
        """Get a menu item by id."""
        pass

    @abstractmethod
    async def update_menu_item_price(self, item_name: str, new_price: Decimal) -> bool:
        """Set the price of the item named exactly `item_name`.

        Returns False when no such item exists.
        """
        pass


def names_overlap(candidate: str, item_name: str) -> bool:
    """Case-insensitive substring match in either direction."""
    candidate_lower = candidate.lower().strip()
    item_lower = item_name.lower()
    if not candidate_lower:
        return False
    return candidate_lower in item_lower or item_lower in candidate_lower
