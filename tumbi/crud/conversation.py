"""CRUD operations for Conversation and Message models."""

from typing import List, Optional, Tuple
from pydantic import BaseModel
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tumbi.crud.base import CRUDBase
from tumbi.db.base import utcnow
from tumbi.models.conversation import Conversation, Message
from tumbi.models.listing import Listing
from tumbi.schemas.chat import ConversationCreate


class CRUDConversation(CRUDBase[Conversation, ConversationCreate, BaseModel]):
    """CRUD operations for Conversation model. Conversations are never updated."""

    async def get_by_listing_and_buyer(
        self,
        db: AsyncSession,
        *,
        listing_id: int,
        buyer_id: int
    ) -> Optional[Conversation]:
        result = await db.execute(
            select(Conversation)
            .where(Conversation.listing_id == listing_id)
            .where(Conversation.buyer_id == buyer_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create(
        self,
        db: AsyncSession,
        *,
        listing: Listing,
        buyer_id: int
    ) -> Tuple[Conversation, bool]:
        """
        Return the buyer's thread about a listing, opening it if needed.

        The second element is True when a new conversation was created.
        If a concurrent request inserts the same thread first, the unique
        (listing_id, buyer_id) constraint rejects ours and theirs is returned.
        """
        existing = await self.get_by_listing_and_buyer(
            db, listing_id=listing.id, buyer_id=buyer_id
        )
        if existing:
            return existing, False

        conversation = Conversation(
            listing_id=listing.id,
            buyer_id=buyer_id,
            seller_id=listing.user_id,
        )
        try:
            async with db.begin_nested():
                db.add(conversation)
        except IntegrityError:
            existing = await self.get_by_listing_and_buyer(
                db, listing_id=listing.id, buyer_id=buyer_id
            )
            if existing is None:
                raise
            return existing, False

        await db.refresh(conversation)
        return conversation, True

    async def get_user_conversations(
        self,
        db: AsyncSession,
        user_id: int
    ) -> List[Tuple[Conversation, Optional[str]]]:
        """
        Inbox for a user: every conversation they take part in, paired with
        the content of its latest message, most recent activity first.
        """
        last_message = (
            select(Message.content)
            .where(Message.conversation_id == Conversation.id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(1)
            .correlate(Conversation)
            .scalar_subquery()
        )
        activity = func.coalesce(Conversation.last_message_at, Conversation.created_at)

        result = await db.execute(
            select(Conversation, last_message)
            .options(
                selectinload(Conversation.listing),
                selectinload(Conversation.buyer),
                selectinload(Conversation.seller)
            )
            .where(
                or_(
                    Conversation.buyer_id == user_id,
                    Conversation.seller_id == user_id
                )
            )
            .order_by(activity.desc(), Conversation.id.desc())
        )
        return [(row[0], row[1]) for row in result.all()]

    async def add_message(
        self,
        db: AsyncSession,
        *,
        conversation: Conversation,
        sender_id: int,
        content: str
    ) -> Message:
        """Append a message; the receiver is the other participant."""
        sent_at = utcnow()
        message = Message(
            conversation_id=conversation.id,
            sender_id=sender_id,
            receiver_id=conversation.other_party(sender_id),
            content=content,
            created_at=sent_at,
        )
        db.add(message)

        conversation.last_message_at = sent_at
        db.add(conversation)

        await db.flush()
        await db.refresh(message)
        return message

    async def get_messages(
        self,
        db: AsyncSession,
        conversation_id: int
    ) -> List[Message]:
        """Full transcript, oldest first."""
        result = await db.execute(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        return list(result.scalars().all())


conversation_crud = CRUDConversation(Conversation)
