"""Listing feed and listing management endpoints."""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tumbi.api.deps import get_current_user
from tumbi.core.config import settings
from tumbi.core.logging import get_logger
from tumbi.crud.listing import listing_crud
from tumbi.db.session import get_db
from tumbi.models.user import User
from tumbi.schemas.common import Message
from tumbi.schemas.listing import (
    ListingCreate,
    ListingCreated,
    ListingResponse,
    ListingUpdate,
    SortKey,
)

logger = get_logger(__name__)
router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Listing not found."
    )


@router.get("", response_model=List[ListingResponse])
async def list_listings(
    limit: int = Query(settings.FEED_PAGE_SIZE, ge=1, le=100),
    offset: int = Query(0, ge=0),
    search: Optional[str] = Query(None),
    main_category: Optional[str] = Query(None, alias="mainCategory"),
    sub_category: Optional[str] = Query(None, alias="subCategory"),
    city: Optional[str] = Query(None),
    sort_by: SortKey = Query(SortKey.NEWEST, alias="sortBy"),
    db: AsyncSession = Depends(get_db)
):
    """
    One page of the feed.

    Empty values, "all" and "All Cities" leave a filter unconstrained.
    A page shorter than `limit` means the feed is exhausted.
    """
    listings = await listing_crud.get_feed(
        db,
        search=search,
        main_category=main_category,
        sub_category=sub_category,
        city=city,
        sort_by=sort_by,
        skip=offset,
        limit=limit,
    )
    return [ListingResponse.from_listing(listing) for listing in listings]


@router.get("/slug/{slug}", response_model=ListingResponse)
async def get_listing_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_db)
):
    """Resolve a share link."""
    listing = await listing_crud.get_by_slug(db, slug=slug)
    if not listing:
        raise _not_found()
    return ListingResponse.from_listing(listing)


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Listing detail. Each fetch counts as a view."""
    await listing_crud.increment_views(db, id=listing_id)
    listing = await listing_crud.get_with_seller(db, id=listing_id)
    if not listing:
        raise _not_found()
    return ListingResponse.from_listing(listing)


@router.post("", response_model=ListingCreated, status_code=status.HTTP_201_CREATED)
async def create_listing(
    listing_in: ListingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Publish a listing. At least one image URL is required."""
    listing = await listing_crud.create_for_seller(db, obj_in=listing_in, seller=current_user)
    logger.info(f"Listing {listing.id} created by user {current_user.id}")
    return ListingCreated(
        message="Listing created successfully.",
        listing_id=listing.id,
        share_slug=listing.share_slug,
    )


@router.put("/{listing_id}", response_model=ListingCreated)
async def update_listing(
    listing_id: int,
    listing_in: ListingUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Replace a listing's fields. Only its owner may do this."""
    listing = await listing_crud.update_owned(
        db, id=listing_id, obj_in=listing_in, owner=current_user
    )
    if not listing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Listing not found or you are not authorized to edit it."
        )
    return ListingCreated(
        message="Listing updated successfully.",
        listing_id=listing.id,
        share_slug=listing.share_slug,
    )


@router.delete("/{listing_id}", response_model=Message)
async def delete_listing(
    listing_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a listing as its owner or an admin."""
    deleted = await listing_crud.delete_allowed(db, id=listing_id, user=current_user)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Listing not found or you are not authorized to delete it."
        )
    logger.info(f"Listing {listing_id} deleted by user {current_user.id}")
    return Message(message="Listing deleted successfully.")
