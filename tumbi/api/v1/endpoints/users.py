"""Profile endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tumbi.api.deps import get_current_user
from tumbi.crud.listing import listing_crud
from tumbi.crud.user import user_crud
from tumbi.db.session import get_db
from tumbi.models.user import User
from tumbi.schemas.listing import ListingResponse, VendorProfileResponse
from tumbi.schemas.user import PublicUserResponse, UserResponse, UserUpdate

router = APIRouter()


@router.put("/me", response_model=UserResponse)
async def update_me(
    user_in: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Edit the signed-in user's profile."""
    conflict = await user_crud.find_conflict(
        db,
        email=user_in.email,
        phone=user_in.phone,
        exclude_id=current_user.id
    )
    if conflict:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"This {conflict} is already in use by another account."
        )

    return await user_crud.update(db, db_obj=current_user, obj_in=user_in)


@router.get("/{user_id}", response_model=VendorProfileResponse)
async def get_vendor_profile(
    user_id: int,
    db: AsyncSession = Depends(get_db)
):
    """A seller's public profile and their listings."""
    user = await user_crud.get(db, id=user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found."
        )

    listings = await listing_crud.get_by_seller(db, user_id=user.id)
    return VendorProfileResponse(
        user=PublicUserResponse.model_validate(user),
        listings=[ListingResponse.from_listing(listing) for listing in listings],
    )
