"""In-memory menu provider."""
import yaml
from decimal import Decimal
from pathlib import Path
from typing import List, Optional
from quickbite.services.menu.base import MenuItem, MenuProvider, names_overlap

DEFAULT_MENU_FILE = Path(__file__).parent / "data" / "menu.yaml"


def load_menu_file(menu_file: Path) -> tuple[List[MenuItem], List[str]]:
    """Load items and categories from a YAML menu file.

    Items get sequential ids in file order.
    """
    with open(menu_file, "r") as f:
        data = yaml.safe_load(f) or {}

    items = []
    for index, raw in enumerate(data.get("items", []), start=1):
        items.append(
            MenuItem(
                id=raw.get("id", index),
                name=raw["name"],
                description=raw.get("description", ""),
                price=Decimal(str(raw["price"])),
                category=raw.get("category"),
                photo_url=raw.get("photo_url"),
            )
        )

    categories = list(data.get("categories", []))
    for item in items:
        if item.category and item.category not in categories:
            categories.append(item.category)
    return items, categories


class InMemoryMenuProvider(MenuProvider):
    """In-memory menu provider using YAML configuration."""

    def __init__(self, menu_file: Optional[str] = None):
        """Initialize with optional menu file path."""
        self.menu_file = Path(menu_file) if menu_file else DEFAULT_MENU_FILE
        self._items: Optional[List[MenuItem]] = None
        self._categories: List[str] = []

    async def _load(self) -> List[MenuItem]:
        """Load menu from YAML file once."""
        if self._items is None:
            self._items, self._categories = load_menu_file(self.menu_file)
        return self._items

    async def list_menu_items(self) -> List[MenuItem]:
        return list(await self._load())

    async def list_categories(self) -> List[str]:
        await self._load()
        return list(self._categories)

    async def find_menu_item_by_exact_name(self, name: str) -> Optional[MenuItem]:
        name_lower = name.lower().strip()
        for item in await self._load():
            if item.name.lower() == name_lower:
                return item
        return None

    async def find_menu_item_by_substring(self, name: str) -> Optional[MenuItem]:
        for item in await self._load():
            if names_overlap(name, item.name):
                return item
        return None

    async def get_item_by_id(self, item_id: int) -> Optional[MenuItem]:
        for item in await self._load():
            if item.id == item_id:
                return item
        return None

    async def update_menu_item_price(self, item_name: str, new_price: Decimal) -> bool:
        items = await self._load()
        name_lower = item_name.lower().strip()
        for index, item in enumerate(items):
            if item.name.lower() == name_lower:
                items[index] = item.model_copy(update={"price": new_price})
                return True
        return False
