"""Conversation and Message models for buyer/seller chat."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional, List

from sqlalchemy import Integer, Text, DateTime, ForeignKey, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column

from tumbi.db.base import Base, utcnow

if TYPE_CHECKING:
    from tumbi.models.listing import Listing
    from tumbi.models.user import User


class Conversation(Base):
    """A thread about one listing between its seller and one buyer."""
    __tablename__ = "conversations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    listing_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    buyer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    seller_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow
    )
    last_message_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    # Relationships
    listing: Mapped["Listing"] = relationship("Listing")
    buyer: Mapped["User"] = relationship("User", foreign_keys=[buyer_id])
    seller: Mapped["User"] = relationship("User", foreign_keys=[seller_id])
    messages: Mapped[List["Message"]] = relationship(
        "Message",
        back_populates="conversation",
        passive_deletes=True,
        order_by="Message.id"
    )

    __table_args__ = (
        UniqueConstraint('listing_id', 'buyer_id', name='uq_conversations_listing_buyer'),
        CheckConstraint('buyer_id <> seller_id', name='ck_conversations_distinct_parties'),
    )

    def has_participant(self, user_id: int) -> bool:
        return user_id in (self.buyer_id, self.seller_id)

    def other_party(self, user_id: int) -> int:
        return self.seller_id if user_id == self.buyer_id else self.buyer_id

    def __repr__(self) -> str:
        return f"<Conversation(id={self.id}, listing_id={self.listing_id}, buyer_id={self.buyer_id})>"


class Message(Base):
    """A single immutable chat message."""
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    conversation_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    sender_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    receiver_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Set in Python so SQLite keeps sub-second precision too
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow
    )

    # Relationships
    conversation: Mapped["Conversation"] = relationship(
        "Conversation",
        back_populates="messages"
    )

    __table_args__ = (
        Index('ix_messages_conversation_created', 'conversation_id', 'created_at'),
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, conversation_id={self.conversation_id}, sender_id={self.sender_id})>"
