"""Seed data for a fresh database."""
import logging
from pathlib import Path
from typing import Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from quickbite.core.config import settings
from quickbite.db.models import Category, MenuItem
from quickbite.services.menu.in_memory_menu import DEFAULT_MENU_FILE, load_menu_file
from quickbite.services.persistence.users import UserPersistenceService

logger = logging.getLogger(__name__)


async def seed_menu(db: AsyncSession, menu_file: Optional[Path] = None) -> int:
    """Load categories and items from the menu file if no category exists yet.

    Returns the number of items created.
    """
    existing = await db.execute(select(func.count(Category.id)))
    if existing.scalar_one() > 0:
        return 0

    items, categories = load_menu_file(menu_file or DEFAULT_MENU_FILE)
    category_rows = {name: Category(name=name) for name in categories}
    db.add_all(category_rows.values())

    for item in items:
        db.add(
            MenuItem(
                name=item.name,
                description=item.description,
                price=item.price,
                photo_url=item.photo_url,
                category=category_rows.get(item.category),
            )
        )
    await db.commit()
    logger.info(f"Seeded {len(categories)} categories and {len(items)} menu items")
    return len(items)


async def seed_database(db: AsyncSession) -> None:
    """Seed the menu and make sure the configured admin account exists."""
    await seed_menu(db)
    await UserPersistenceService(db).ensure_admin(settings.admin_email, settings.admin_password)
