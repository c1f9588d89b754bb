"""CRUD operations for Listing model."""

import re
import secrets
from typing import List, Optional
from sqlalchemy import select, update, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tumbi.crud.base import CRUDBase
from tumbi.models.listing import Listing
from tumbi.models.user import User
from tumbi.schemas.listing import ListingCreate, ListingUpdate, SortKey, is_constrained

_SORT_ORDER = {
    SortKey.NEWEST: (Listing.created_at.desc(), Listing.id.asc()),
    SortKey.OLDEST: (Listing.created_at.asc(), Listing.id.asc()),
    SortKey.PRICE_ASC: (Listing.price.asc(), Listing.id.asc()),
    SortKey.PRICE_DESC: (Listing.price.desc(), Listing.id.asc()),
}


def make_share_slug(title: str) -> str:
    """Build a URL-safe share slug from a title plus a short random suffix."""
    base = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")[:60].rstrip("-")
    suffix = secrets.token_hex(3)
    return f"{base}-{suffix}" if base else suffix


class CRUDListing(CRUDBase[Listing, ListingCreate, ListingUpdate]):
    """CRUD operations for Listing model."""

    async def get_with_seller(
        self,
        db: AsyncSession,
        id: int
    ) -> Optional[Listing]:
        """Get listing with its seller loaded."""
        result = await db.execute(
            select(Listing)
            .options(selectinload(Listing.seller))
            .where(Listing.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_slug(
        self,
        db: AsyncSession,
        slug: str
    ) -> Optional[Listing]:
        """Resolve a share slug to its listing."""
        result = await db.execute(
            select(Listing)
            .options(selectinload(Listing.seller))
            .where(Listing.share_slug == slug)
        )
        return result.scalar_one_or_none()

    async def get_feed(
        self,
        db: AsyncSession,
        *,
        search: Optional[str] = None,
        main_category: Optional[str] = None,
        sub_category: Optional[str] = None,
        city: Optional[str] = None,
        sort_by: SortKey = SortKey.NEWEST,
        skip: int = 0,
        limit: int = 12
    ) -> List[Listing]:
        """
        One page of the public feed.

        Every filter is optional; search is a case-insensitive substring
        match against title or description. Ordering is total: the sort key
        first, then listing id ascending.
        """
        stmt = select(Listing).options(selectinload(Listing.seller))

        if search and search.strip():
            term = search.strip()
            # % and _ in the term are matched literally
            stmt = stmt.where(
                or_(
                    Listing.title.icontains(term, autoescape=True),
                    Listing.description.icontains(term, autoescape=True)
                )
            )

        if is_constrained(main_category):
            stmt = stmt.where(Listing.main_category == main_category)

        if is_constrained(sub_category):
            stmt = stmt.where(Listing.sub_category == sub_category)

        if is_constrained(city):
            stmt = stmt.where(Listing.location == city)

        stmt = stmt.order_by(*_SORT_ORDER[sort_by]).offset(skip).limit(limit)

        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_seller(
        self,
        db: AsyncSession,
        *,
        user_id: int
    ) -> List[Listing]:
        """All listings of one seller, newest first."""
        result = await db.execute(
            select(Listing)
            .options(selectinload(Listing.seller))
            .where(Listing.user_id == user_id)
            .order_by(*_SORT_ORDER[SortKey.NEWEST])
        )
        return list(result.scalars().all())

    async def create_for_seller(
        self,
        db: AsyncSession,
        *,
        obj_in: ListingCreate,
        seller: User
    ) -> Listing:
        """Create a listing owned by seller, assigning its share slug."""
        return await self.create(db, obj_in={
            **obj_in.model_dump(),
            "user_id": seller.id,
            "share_slug": make_share_slug(obj_in.title),
        })

    async def update_owned(
        self,
        db: AsyncSession,
        *,
        id: int,
        obj_in: ListingUpdate,
        owner: User
    ) -> Optional[Listing]:
        """
        Replace every mutable field of a listing.

        Returns None when the listing does not exist or belongs to someone
        else; callers cannot tell the two apart.
        """
        listing = await self.get(db, id=id)
        if not listing or listing.user_id != owner.id:
            return None
        return await self.update(db, db_obj=listing, obj_in=obj_in)

    async def delete_allowed(
        self,
        db: AsyncSession,
        *,
        id: int,
        user: User
    ) -> bool:
        """Delete a listing if user owns it or is an admin."""
        listing = await self.get(db, id=id)
        if not listing:
            return False
        if listing.user_id != user.id and not user.is_admin:
            return False
        await db.delete(listing)
        await db.flush()
        return True

    async def increment_views(
        self,
        db: AsyncSession,
        *,
        id: int
    ) -> None:
        """Bump the view counter in a single UPDATE."""
        await db.execute(
            update(Listing)
            .where(Listing.id == id)
            .values(views=Listing.views + 1)
            .execution_options(synchronize_session=False)
        )


listing_crud = CRUDListing(Listing)
