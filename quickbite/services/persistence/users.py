"""User account persistence service."""
import hashlib
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from quickbite.db.models import User

logger = logging.getLogger(__name__)

ROLES = ["Member", "Admin"]


def hash_password(password: str) -> str:
    """Hash password for comparison."""
    return hashlib.sha256(password.encode()).hexdigest()


class UserPersistenceService:
    """Service for persisting user accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == email.lower().strip())
        )
        return result.scalar_one_or_none()

    async def create_user(
        self,
        email: str,
        name: str,
        password: str,
        role: str = "Member",
        phone_number: Optional[str] = None,
        address: Optional[str] = None,
    ) -> User:
        """Create an account. Raises ValueError if the email is taken or the role unknown."""
        if role not in ROLES:
            raise ValueError(f"Unknown role '{role}'")
        if await self.get_user_by_email(email):
            raise ValueError(f"An account with email '{email}' already exists")

        user = User(
            email=email.lower().strip(),
            name=name.strip(),
            password_hash=hash_password(password),
            role=role,
            phone_number=phone_number,
            address=address,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(f"[AUTH] Created {role} account {user.email}")
        return user

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user if the password matches."""
        user = await self.get_user_by_email(email)
        if user and user.password_hash == hash_password(password):
            return user
        return None

    async def ensure_admin(self, email: str, password: str, name: str = "Administrator") -> User:
        """Create the admin account if it does not exist yet."""
        user = await self.get_user_by_email(email)
        if user:
            return user
        return await self.create_user(email, name, password, role="Admin")

    async def update_password(self, user_id: int, current_password: str, new_password: str) -> User:
        """
        Replace a user's password.

        Raises:
            ValueError: unknown user, wrong current password or an empty new password
        """
        user = await self.db.get(User, user_id)
        if user is None:
            raise ValueError(f"User {user_id} not found")
        if user.password_hash != hash_password(current_password):
            raise ValueError("Current password not matched")
        if not new_password:
            raise ValueError("New password is required")

        user.password_hash = hash_password(new_password)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(f"[AUTH] Password updated for {user.email}")
        return user

    async def update_profile(
        self,
        user_id: int,
        name: str,
        phone_number: Optional[str] = None,
        address: Optional[str] = None,
    ) -> User:
        """Update a member's name and contact details. Raises ValueError for an unknown user or empty name."""
        user = await self.db.get(User, user_id)
        if user is None:
            raise ValueError(f"User {user_id} not found")
        if not name.strip():
            raise ValueError("Name is required")

        user.name = name.strip()
        user.phone_number = phone_number
        user.address = address
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(f"[AUTH] Profile updated for {user.email}")
        return user
