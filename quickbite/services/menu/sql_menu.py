"""Database-backed menu provider."""
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quickbite.db import models
from quickbite.services.menu.base import MenuItem, MenuProvider, names_overlap


def to_menu_item(row: models.MenuItem) -> MenuItem:
    """Convert a database row to a menu item."""
    return MenuItem(
        id=row.id,
        name=row.name,
        description=row.description or "",
        price=Decimal(str(row.price)),
        category=row.category.name if row.category else None,
        photo_url=row.photo_url,
    )


class SqlMenuProvider(MenuProvider):
    """Menu provider reading the menu_items table. Catalog order is by id."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _rows(self) -> List[models.MenuItem]:
        result = await self.db.execute(
            select(models.MenuItem)
            .options(selectinload(models.MenuItem.category))
            .order_by(models.MenuItem.id)
        )
        return list(result.scalars().all())

    async def _row_by_exact_name(self, name: str) -> Optional[models.MenuItem]:
        result = await self.db.execute(
            select(models.MenuItem)
            .options(selectinload(models.MenuItem.category))
            .where(func.lower(models.MenuItem.name) == name.lower().strip())
            .order_by(models.MenuItem.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_menu_items(self) -> List[MenuItem]:
        return [to_menu_item(row) for row in await self._rows()]

    async def list_categories(self) -> List[str]:
        result = await self.db.execute(select(models.Category.name).order_by(models.Category.id))
        return list(result.scalars().all())

    async def find_menu_item_by_exact_name(self, name: str) -> Optional[MenuItem]:
        row = await self._row_by_exact_name(name)
        return to_menu_item(row) if row else None

    async def find_menu_item_by_substring(self, name: str) -> Optional[MenuItem]:
        for row in await self._rows():
            if names_overlap(name, row.name):
                return to_menu_item(row)
        return None

    async def get_item_by_id(self, item_id: int) -> Optional[MenuItem]:
        result = await self.db.execute(
            select(models.MenuItem)
            .options(selectinload(models.MenuItem.category))
            .where(models.MenuItem.id == item_id)
        )
        row = result.scalar_one_or_none()
        return to_menu_item(row) if row else None

    async def update_menu_item_price(self, item_name: str, new_price: Decimal) -> bool:
        row = await self._row_by_exact_name(item_name)
        if row is None:
            return False
        row.price = new_price
        await self.db.commit()
        return True
