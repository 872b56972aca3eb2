"""Menu management persistence service (admin operations)."""
import logging
from decimal import Decimal
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, delete

from quickbite.db.models import Category, MenuItem, MenuItemComment, MenuItemRating
from quickbite.services.chat.extractor import parse_price

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ["name", "description", "price"]


class MenuAdminService:
    """Service for adding, modifying and deleting menu items and categories."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_category(self, name: str) -> Optional[Category]:
        result = await self.db.execute(
            select(Category).where(func.lower(Category.name) == name.lower().strip())
        )
        return result.scalar_one_or_none()

    async def get_menu_item(self, item_id: int) -> Optional[MenuItem]:
        return await self.db.get(MenuItem, item_id)

    async def add_category(self, name: str) -> Category:
        if await self.get_category(name):
            raise ValueError(f"Category '{name}' already exists")
        category = Category(name=name.strip())
        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)
        return category

    async def add_menu_item(
        self,
        name: str,
        description: str,
        price: Decimal,
        category: str,
        photo_url: Optional[str] = None,
    ) -> MenuItem:
        """Add a menu item. Raises ValueError for an unknown category or a non-positive price."""
        category_row = await self.get_category(category)
        if category_row is None:
            raise ValueError(f"Category '{category}' not found")
        if price is None or price <= 0:
            raise ValueError("Price must be more than 0")

        item = MenuItem(
            name=name.strip(),
            description=description.strip(),
            price=price,
            photo_url=photo_url,
            category_id=category_row.id,
        )
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)
        logger.info(f"[MENU] Added menu item '{item.name}' ({item.id}) to '{category_row.name}'")
        return item

    async def modify_menu_item(self, item_id: int, field: str, new_value: str) -> MenuItem:
        """
        Change one field of a menu item.

        Raises:
            ValueError: unknown item or field, or a price that does not parse
        """
        item = await self.get_menu_item(item_id)
        if item is None:
            raise ValueError(f"Menu item {item_id} not found")

        field = field.lower().strip()
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown field '{field}'")

        if field == "price":
            price = parse_price(new_value)
            if price is None:
                raise ValueError("Invalid price value")
            item.price = price
        elif field == "name":
            if not new_value.strip():
                raise ValueError("Name is required")
            item.name = new_value.strip()
        else:
            item.description = new_value.strip()

        await self.db.commit()
        await self.db.refresh(item)
        logger.info(f"[MENU] Updated menu item {item_id} ({field})")
        return item

    async def delete_menu_item(self, item_id: int) -> bool:
        """Delete a menu item together with its ratings and comments."""
        item = await self.get_menu_item(item_id)
        if item is None:
            return False
        await self.db.execute(delete(MenuItemRating).where(MenuItemRating.menu_item_id == item_id))
        await self.db.execute(delete(MenuItemComment).where(MenuItemComment.menu_item_id == item_id))
        await self.db.delete(item)
        await self.db.commit()
        logger.info(f"[MENU] Deleted menu item {item_id}")
        return True

    async def rename_category(self, current_name: str, new_name: str) -> Category:
        category = await self.get_category(current_name)
        if category is None:
            raise ValueError(f"Category '{current_name}' not found")
        category.name = new_name.strip()
        await self.db.commit()
        await self.db.refresh(category)
        return category

    async def delete_category(self, name: str) -> bool:
        """Delete a category; its items are kept without a category."""
        category = await self.get_category(name)
        if category is None:
            return False
        result = await self.db.execute(select(MenuItem).where(MenuItem.category_id == category.id))
        for item in result.scalars().all():
            item.category = None
        await self.db.delete(category)
        await self.db.commit()
        return True
