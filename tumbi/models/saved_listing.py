"""SavedListing model: a user's bookmark on a listing."""

from datetime import datetime

from sqlalchemy import Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column

from tumbi.db.base import Base


class SavedListing(Base):
    """Join row between a user and a listing they saved."""
    __tablename__ = "saved_listings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    listing_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint('user_id', 'listing_id', name='uq_saved_listings_user_listing'),
    )

    def __repr__(self) -> str:
        return f"<SavedListing(user_id={self.user_id}, listing_id={self.listing_id})>"
