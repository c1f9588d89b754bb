"""Listing and feed schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from tumbi.schemas.user import PublicUserResponse


# Filter values the client sends to mean "no constraint"
_UNCONSTRAINED = {"", "all", "all cities"}


def is_constrained(value: Optional[str]) -> bool:
    """True when a filter value actually narrows the feed."""
    return value is not None and value.strip().lower() not in _UNCONSTRAINED


class SortKey(str, Enum):
    """Feed orderings. Ties are always broken by listing id ascending."""
    NEWEST = "newest"
    OLDEST = "oldest"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"


class ListingBase(BaseModel):
    """Fields a seller controls."""
    title: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1, max_length=50)
    location: str = Field(..., min_length=1, max_length=255)
    main_category: str = Field(..., min_length=1, max_length=100)
    sub_category: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    image_urls: List[str] = Field(..., min_length=1)
    contact_phone: Optional[str] = Field(None, max_length=32)

    @field_validator("image_urls")
    @classmethod
    def non_blank_urls(cls, v: List[str]) -> List[str]:
        urls = [u.strip() for u in v]
        if any(not u for u in urls):
            raise ValueError("Image URLs must not be blank")
        return urls


class ListingCreate(ListingBase):
    """Schema for creating a listing. At least one image is required."""
    pass


class ListingUpdate(ListingBase):
    """Full replace of every mutable field."""
    pass


class ListingResponse(ListingBase):
    """A listing as shown in the feed and on the detail page."""
    id: int
    image_urls: List[str] = []
    share_slug: Optional[str] = None
    views: int = 0
    is_verified: bool = False
    created_at: datetime
    seller_id: int
    seller_name: Optional[str] = None
    seller_phone: Optional[str] = None
    seller_image: Optional[str] = None
    seller_company_name: Optional[str] = None
    seller_is_verified: bool = False

    @classmethod
    def from_listing(cls, listing) -> "ListingResponse":
        """Flatten a Listing row and its loaded seller into the response."""
        seller = listing.seller
        return cls(
            id=listing.id,
            title=listing.title,
            price=listing.price,
            unit=listing.unit,
            location=listing.location,
            main_category=listing.main_category,
            sub_category=listing.sub_category,
            description=listing.description,
            image_urls=list(listing.image_urls or []),
            contact_phone=listing.contact_phone,
            share_slug=listing.share_slug,
            views=listing.views,
            is_verified=listing.is_verified,
            created_at=listing.created_at,
            seller_id=listing.user_id,
            seller_name=seller.name if seller else None,
            seller_phone=seller.phone if seller else None,
            seller_image=seller.avatar_url if seller else None,
            seller_company_name=seller.company_name if seller else None,
            seller_is_verified=seller.is_verified if seller else False,
        )


class ListingCreated(BaseModel):
    """Acknowledgement of a create or update."""
    message: str
    listing_id: int
    share_slug: Optional[str] = None


class VendorProfileResponse(BaseModel):
    """A seller's public profile with their listings, newest first."""
    user: PublicUserResponse
    listings: List[ListingResponse]


class SavedStatus(BaseModel):
    """Membership of one listing in the caller's saved set."""
    listing_id: int
    is_saved: bool
