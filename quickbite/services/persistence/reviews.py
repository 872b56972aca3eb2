"""Menu item ratings and comments."""
import logging
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from quickbite.db.models import MenuItem, MenuItemComment, MenuItemRating, User

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
MAX_COMMENT_LENGTH = 500


class RatingSummary(BaseModel):
    """Average rating of a menu item and how many members rated it."""

    average: float = 0.0
    count: int = 0


class CommentView(BaseModel):
    """A comment with its author's display name."""

    id: int
    author: str
    content: str
    commented_at: datetime


class ReviewPersistenceService:
    """Service for member ratings and comments on menu items."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _require_item(self, menu_item_id: int) -> MenuItem:
        item = await self.db.get(MenuItem, menu_item_id)
        if item is None:
            raise ValueError(f"Menu item {menu_item_id} not found")
        return item

    async def rate_menu_item(self, menu_item_id: int, member_id: int, value: int) -> RatingSummary:
        """
        Record a rating, replacing the member's earlier rating of the same item.

        Raises:
            ValueError: unknown item or a value outside 1-5
        """
        if not MIN_RATING <= value <= MAX_RATING:
            raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        await self._require_item(menu_item_id)

        result = await self.db.execute(
            select(MenuItemRating).where(
                MenuItemRating.menu_item_id == menu_item_id,
                MenuItemRating.member_id == member_id,
            )
        )
        rating = result.scalar_one_or_none()
        if rating is None:
            self.db.add(MenuItemRating(menu_item_id=menu_item_id, member_id=member_id, value=value))
        else:
            rating.value = value
            rating.rated_at = datetime.utcnow()
        await self.db.commit()

        logger.info(f"[REVIEWS] Member {member_id} rated item {menu_item_id}: {value}")
        return await self.get_rating_summary(menu_item_id)

    async def get_rating_summary(self, menu_item_id: int) -> RatingSummary:
        result = await self.db.execute(
            select(func.avg(MenuItemRating.value), func.count(MenuItemRating.id)).where(
                MenuItemRating.menu_item_id == menu_item_id
            )
        )
        average, count = result.one()
        if not count:
            return RatingSummary()
        return RatingSummary(average=round(float(average), 2), count=count)

    async def add_comment(self, menu_item_id: int, member_id: int, content: str) -> MenuItemComment:
        """
        Add a comment to a menu item.

        Raises:
            ValueError: unknown item, or empty or overlong content
        """
        content = (content or "").strip()
        if not content:
            raise ValueError("Comment cannot be empty")
        if len(content) > MAX_COMMENT_LENGTH:
            raise ValueError(f"Comment must be at most {MAX_COMMENT_LENGTH} characters")
        await self._require_item(menu_item_id)

        comment = MenuItemComment(menu_item_id=menu_item_id, member_id=member_id, content=content)
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)
        logger.info(f"[REVIEWS] Member {member_id} commented on item {menu_item_id}")
        return comment

    async def list_comments(self, menu_item_id: int, limit: Optional[int] = None) -> List[CommentView]:
        """Comments on an item, newest first."""
        query = (
            select(MenuItemComment, User.name)
            .join(User, User.id == MenuItemComment.member_id)
            .where(MenuItemComment.menu_item_id == menu_item_id)
            .order_by(MenuItemComment.commented_at.desc(), MenuItemComment.id.desc())
        )
        if limit:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return [
            CommentView(
                id=comment.id,
                author=author,
                content=comment.content,
                commented_at=comment.commented_at,
            )
            for comment, author in result.all()
        ]
