"""CRUD operations for SavedListing model."""

from typing import List
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tumbi.models.listing import Listing
from tumbi.models.saved_listing import SavedListing


class CRUDSaved:
    """Membership operations on a user's saved set."""

    async def is_saved(
        self,
        db: AsyncSession,
        *,
        user_id: int,
        listing_id: int
    ) -> bool:
        result = await db.execute(
            select(SavedListing.id)
            .where(SavedListing.user_id == user_id)
            .where(SavedListing.listing_id == listing_id)
        )
        return result.scalar_one_or_none() is not None

    async def add(
        self,
        db: AsyncSession,
        *,
        user_id: int,
        listing_id: int
    ) -> bool:
        """Save a listing. Returns False if it was already saved."""
        if await self.is_saved(db, user_id=user_id, listing_id=listing_id):
            return False
        db.add(SavedListing(user_id=user_id, listing_id=listing_id))
        await db.flush()
        return True

    async def remove(
        self,
        db: AsyncSession,
        *,
        user_id: int,
        listing_id: int
    ) -> bool:
        """Unsave a listing. Returns False if it was not saved."""
        result = await db.execute(
            delete(SavedListing)
            .where(SavedListing.user_id == user_id)
            .where(SavedListing.listing_id == listing_id)
        )
        return result.rowcount > 0

    async def list_listings(
        self,
        db: AsyncSession,
        *,
        user_id: int
    ) -> List[Listing]:
        """Saved listings, most recently saved first."""
        result = await db.execute(
            select(Listing)
            .join(SavedListing, SavedListing.listing_id == Listing.id)
            .options(selectinload(Listing.seller))
            .where(SavedListing.user_id == user_id)
            .order_by(SavedListing.created_at.desc(), SavedListing.id.desc())
        )
        return list(result.scalars().all())


saved_crud = CRUDSaved()
