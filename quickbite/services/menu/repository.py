"""Menu repository."""
import logging
from decimal import Decimal
from typing import List, Optional
from quickbite.core.config import settings
from quickbite.services.menu.base import Menu, MenuItem, MenuProvider

logger = logging.getLogger(__name__)


def singular_forms(name: str) -> List[str]:
    """Plausible singular spellings of a plural candidate ("burgers", "sandwiches")."""
    forms = []
    if name.endswith("es") and len(name) > 3:
        forms.append(name[:-2])
    if name.endswith("s") and not name.endswith("ss") and len(name) > 2:
        forms.append(name[:-1])
    return forms


class MenuRepository:
    """Repository for menu operations."""

    def __init__(self, provider: MenuProvider):
        self.provider = provider

    async def get_menu(self) -> Menu:
        """Get the full menu."""
        return Menu(
            items=await self.provider.list_menu_items(),
            categories=await self.provider.list_categories(),
        )

    async def list_menu_items(self) -> List[MenuItem]:
        return await self.provider.list_menu_items()

    async def list_categories(self) -> List[str]:
        return await self.provider.list_categories()

    async def filter_menu_items(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
    ) -> List[MenuItem]:
        """
        Items matching every given filter, in catalog order.

        `search` matches within the item name and `category` matches the
        category name, both ignoring case. Price bounds are inclusive.
        """
        search = (search or "").strip().lower()
        category = (category or "").strip().lower()

        items = []
        for item in await self.provider.list_menu_items():
            if search and search not in item.name.lower():
                continue
            if category and (item.category or "").lower() != category:
                continue
            if min_price is not None and item.price < min_price:
                continue
            if max_price is not None and item.price > max_price:
                continue
            items.append(item)
        return items

    async def get_menu_names(self) -> List[str]:
        """Names of all items in catalog order."""
        return [item.name for item in await self.provider.list_menu_items()]

    async def get_item_by_id(self, item_id: int) -> Optional[MenuItem]:
        return await self.provider.get_item_by_id(item_id)

    async def find_menu_item_by_exact_name(self, name: str) -> Optional[MenuItem]:
        return await self.provider.find_menu_item_by_exact_name(name)

    async def update_menu_item_price(self, item_name: str, new_price: Decimal) -> bool:
        return await self.provider.update_menu_item_price(item_name, new_price)

    async def resolve_item_name(self, candidate: str) -> Optional[MenuItem]:
        """
        Resolve a free-text item name against the catalog.

        Exact (case-insensitive) match is tried first, then substring match in
        either direction. A plural candidate is retried in singular form when
        both miss.
        """
        candidate = candidate.strip()
        if not candidate:
            return None

        for name in [candidate] + singular_forms(candidate.lower()):
            item = await self.provider.find_menu_item_by_exact_name(name)
            if item is None:
                item = await self.provider.find_menu_item_by_substring(name)
            if item is not None:
                logger.debug(f"[MENU] Resolved '{candidate}' -> '{item.name}'")
                return item

        logger.debug(f"[MENU] No menu item matches '{candidate}'")
        return None

    async def get_menu_text(self) -> str:
        """Get menu as formatted text grouped by category."""
        menu = await self.get_menu()
        lines = ["Menu:"]
        for category in menu.categories:
            category_items = [item for item in menu.items if item.category == category]
            if not category_items:
                continue
            lines.append(f"\n{category}:")
            for item in category_items:
                desc_str = f" - {item.description}" if item.description else ""
                lines.append(f"  - {item.name} {settings.currency} {item.price:.2f}{desc_str}")
        return "\n".join(lines)
