"""Saved-items endpoints."""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tumbi.api.deps import get_current_user
from tumbi.crud.listing import listing_crud
from tumbi.crud.saved import saved_crud
from tumbi.db.session import get_db
from tumbi.models.user import User
from tumbi.schemas.listing import ListingResponse, SavedStatus

router = APIRouter()


@router.get("", response_model=List[ListingResponse])
async def list_saved(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """The caller's saved listings, most recently saved first."""
    listings = await saved_crud.list_listings(db, user_id=current_user.id)
    return [ListingResponse.from_listing(listing) for listing in listings]


@router.get("/{listing_id}", response_model=SavedStatus)
async def get_saved_status(
    listing_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    saved = await saved_crud.is_saved(db, user_id=current_user.id, listing_id=listing_id)
    return SavedStatus(listing_id=listing_id, is_saved=saved)


@router.post("/{listing_id}", response_model=SavedStatus)
async def save_listing(
    listing_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Add a listing to the saved set. Saving twice is harmless."""
    if not await listing_crud.get(db, id=listing_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Listing not found."
        )
    await saved_crud.add(db, user_id=current_user.id, listing_id=listing_id)
    return SavedStatus(listing_id=listing_id, is_saved=True)


@router.delete("/{listing_id}", response_model=SavedStatus)
async def unsave_listing(
    listing_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Remove a listing from the saved set. Removing twice is harmless."""
    await saved_crud.remove(db, user_id=current_user.id, listing_id=listing_id)
    return SavedStatus(listing_id=listing_id, is_saved=False)
