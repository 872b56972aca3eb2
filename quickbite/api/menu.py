"""Menu API endpoints."""
import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from quickbite.api.auth import SessionUser, require_admin, require_member
from quickbite.core.dependencies import get_menu_repository
from quickbite.db.database import get_db
from quickbite.services.menu.base import MenuItem
from quickbite.services.menu.repository import MenuRepository
from quickbite.services.persistence.menu import MenuAdminService
from quickbite.services.persistence.reviews import (
    MAX_COMMENT_LENGTH,
    MAX_RATING,
    MIN_RATING,
    CommentView,
    RatingSummary,
    ReviewPersistenceService,
)

router = APIRouter()
logger = logging.getLogger(__name__)


class MenuItemResponse(BaseModel):
    """Menu item response model."""
    id: int
    name: str
    description: Optional[str] = None
    price: float
    category: Optional[str] = None
    photo_url: Optional[str] = None

    class Config:
        from_attributes = True


class MenuResponse(BaseModel):
    """Menu response model."""
    items: List[MenuItemResponse]
    categories: List[str] = []

    class Config:
        from_attributes = True


class MenuItemCreate(BaseModel):
    """New menu item."""
    name: str = Field(min_length=1)
    description: str = ""
    price: Decimal
    category: str
    photo_url: Optional[str] = None


class MenuItemUpdate(BaseModel):
    """Single-field change to a menu item."""
    field: str
    value: str


class CategoryRequest(BaseModel):
    name: str = Field(min_length=1)


class RatingRequest(BaseModel):
    value: int = Field(ge=MIN_RATING, le=MAX_RATING)


class CommentRequest(BaseModel):
    content: str = Field(min_length=1, max_length=MAX_COMMENT_LENGTH)


class CommentResponse(BaseModel):
    id: int
    author: str
    content: str
    commented_at: str


class ReviewsResponse(BaseModel):
    """Ratings summary and comments for one menu item."""
    menu_item_id: int
    rating: RatingSummary
    comments: List[CommentResponse]


def _comment_response(comment: CommentView) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        author=comment.author,
        content=comment.content,
        commented_at=comment.commented_at.isoformat(),
    )


def _item_response(item: MenuItem) -> MenuItemResponse:
    return MenuItemResponse(
        id=item.id,
        name=item.name,
        description=item.description,
        price=float(item.price),
        category=item.category,
        photo_url=item.photo_url,
    )


@router.get("/api/menu", response_model=MenuResponse)
async def get_menu(
    request: Request,
    search: Optional[str] = None,
    category: Optional[str] = None,
    min_price: Optional[Decimal] = Query(default=None, ge=0),
    max_price: Optional[Decimal] = Query(default=None, ge=0),
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Get the menu, optionally filtered by name, category and price range."""
    logger.info(
        f"[MENU] Request received - Client: {request.client.host if request.client else 'unknown'}, "
        f"search: {search!r}, category: {category!r}, price: {min_price}-{max_price}"
    )

    try:
        items = await menu_repository.filter_menu_items(search, category, min_price, max_price)
        categories = await menu_repository.list_categories()
        logger.info(f"[MENU] Menu loaded - {len(items)} items, {len(categories)} categories")
        return MenuResponse(
            items=[_item_response(item) for item in items],
            categories=categories,
        )
    except Exception as e:
        logger.error(
            f"[MENU] Error fetching menu - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error fetching menu: {str(e)}")


@router.get("/api/menu/text", response_class=PlainTextResponse)
async def get_menu_text(menu_repository: MenuRepository = Depends(get_menu_repository)):
    """Menu as plain text grouped by category."""
    return await menu_repository.get_menu_text()


@router.get("/api/menu/items/{item_id}", response_model=MenuItemResponse)
async def get_menu_item(
    item_id: int,
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    item = await menu_repository.get_item_by_id(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return _item_response(item)


@router.post("/api/menu/items", response_model=MenuItemResponse, status_code=201)
async def add_menu_item(
    item: MenuItemCreate,
    admin: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Add a menu item (admin only)."""
    try:
        created = await MenuAdminService(db).add_menu_item(
            item.name, item.description, item.price, item.category, item.photo_url
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info(f"[MENU] {admin.email} added menu item {created.id}")
    return _item_response(await menu_repository.get_item_by_id(created.id))


@router.patch("/api/menu/items/{item_id}", response_model=MenuItemResponse)
async def modify_menu_item(
    item_id: int,
    update: MenuItemUpdate,
    admin: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Change the name, description or price of a menu item (admin only)."""
    service = MenuAdminService(db)
    if await service.get_menu_item(item_id) is None:
        raise HTTPException(status_code=404, detail="Menu item not found")
    try:
        await service.modify_menu_item(item_id, update.field, update.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info(f"[MENU] {admin.email} modified {update.field} of menu item {item_id}")
    return _item_response(await menu_repository.get_item_by_id(item_id))


@router.delete("/api/menu/items/{item_id}")
async def delete_menu_item(
    item_id: int,
    admin: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    if not await MenuAdminService(db).delete_menu_item(item_id):
        raise HTTPException(status_code=404, detail="Menu item not found")
    logger.info(f"[MENU] {admin.email} deleted menu item {item_id}")
    return {"success": True}


@router.post("/api/menu/categories", status_code=201)
async def add_category(
    category: CategoryRequest,
    admin: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        created = await MenuAdminService(db).add_category(category.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"id": created.id, "name": created.name}


@router.patch("/api/menu/categories/{name}")
async def rename_category(
    name: str,
    category: CategoryRequest,
    admin: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        renamed = await MenuAdminService(db).rename_category(name, category.name)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"id": renamed.id, "name": renamed.name}


@router.delete("/api/menu/categories/{name}")
async def delete_category(
    name: str,
    admin: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a category; its items stay on the menu without one."""
    if not await MenuAdminService(db).delete_category(name):
        raise HTTPException(status_code=404, detail="Category not found")
    return {"success": True}


@router.get("/api/menu/items/{item_id}/reviews", response_model=ReviewsResponse)
async def get_item_reviews(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Average rating and comments (newest first) for a menu item."""
    if await menu_repository.get_item_by_id(item_id) is None:
        raise HTTPException(status_code=404, detail="Menu item not found")
    service = ReviewPersistenceService(db)
    return ReviewsResponse(
        menu_item_id=item_id,
        rating=await service.get_rating_summary(item_id),
        comments=[_comment_response(comment) for comment in await service.list_comments(item_id)],
    )


@router.post("/api/menu/items/{item_id}/ratings", response_model=RatingSummary)
async def rate_menu_item(
    item_id: int,
    rating: RatingRequest,
    member: SessionUser = Depends(require_member),
    db: AsyncSession = Depends(get_db),
):
    """Rate a menu item 1-5; rating again replaces the member's earlier rating."""
    try:
        return await ReviewPersistenceService(db).rate_menu_item(item_id, member.user_id, rating.value)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/api/menu/items/{item_id}/comments", response_model=CommentResponse, status_code=201)
async def add_item_comment(
    item_id: int,
    comment: CommentRequest,
    member: SessionUser = Depends(require_member),
    db: AsyncSession = Depends(get_db),
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    if await menu_repository.get_item_by_id(item_id) is None:
        raise HTTPException(status_code=404, detail="Menu item not found")
    try:
        created = await ReviewPersistenceService(db).add_comment(item_id, member.user_id, comment.content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CommentResponse(
        id=created.id,
        author=member.name,
        content=created.content,
        commented_at=created.commented_at.isoformat(),
    )
