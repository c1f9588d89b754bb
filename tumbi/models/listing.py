"""Listing model: a product or service offered by a seller."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional, List

from sqlalchemy import Integer, String, Text, Float, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, Mapped, mapped_column

from tumbi.db.base import Base, JSONB, utcnow

if TYPE_CHECKING:
    from tumbi.models.user import User


class Listing(Base):
    """Listing model for the marketplace feed."""
    __tablename__ = "listings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    price: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)  # pcs, kg, bag, hr, job...

    location: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    main_category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    sub_category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # Ordered public URLs from the object store
    image_urls: Mapped[List[str]] = mapped_column(JSONB, nullable=False, default=list)

    contact_phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    share_slug: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)

    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Timestamps
    # Python-side default keeps sub-second precision for newest-first sorting
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        index=True
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now()
    )

    # Relationships
    seller: Mapped["User"] = relationship("User", back_populates="listings")

    __table_args__ = (
        Index('ix_listings_price', 'price'),
    )

    def __repr__(self) -> str:
        return f"<Listing(id={self.id}, title={self.title!r}, price={self.price})>"
