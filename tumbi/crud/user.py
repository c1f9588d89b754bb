"""CRUD operations for User model."""

from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tumbi.crud.base import CRUDBase
from tumbi.models.user import User
from tumbi.schemas.user import UserCreate, UserUpdate
from tumbi.core.security import get_password_hash, verify_password


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    """CRUD operations for User model."""

    async def get_by_email(
        self,
        db: AsyncSession,
        email: str
    ) -> Optional[User]:
        """Get user by email address."""
        result = await db.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def get_by_phone(
        self,
        db: AsyncSession,
        phone: str
    ) -> Optional[User]:
        """Get user by phone number."""
        result = await db.execute(
            select(User).where(User.phone == phone)
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: UserCreate
    ) -> User:
        """Create a new user with hashed password."""
        db_obj = User(
            name=obj_in.name,
            email=obj_in.email,
            phone=obj_in.phone,
            company_name=obj_in.company_name,
            location=obj_in.location,
            hashed_password=get_password_hash(obj_in.password),
        )
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def authenticate(
        self,
        db: AsyncSession,
        *,
        password: str,
        email: Optional[str] = None,
        phone: Optional[str] = None
    ) -> Optional[User]:
        """Authenticate a user by email (or phone) and password."""
        if email:
            user = await self.get_by_email(db, email=email)
        else:
            user = await self.get_by_phone(db, phone=phone)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    async def find_conflict(
        self,
        db: AsyncSession,
        *,
        email: str,
        phone: Optional[str] = None,
        exclude_id: Optional[int] = None
    ) -> Optional[str]:
        """
        Report which unique field another account already holds.

        Returns "email", "phone" or None.
        """
        existing = await self.get_by_email(db, email=email)
        if existing and existing.id != exclude_id:
            return "email"
        if phone:
            existing = await self.get_by_phone(db, phone=phone)
            if existing and existing.id != exclude_id:
                return "phone"
        return None


user_crud = CRUDUser(User)
