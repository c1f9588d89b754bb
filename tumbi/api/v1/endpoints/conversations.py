"""Buyer/seller conversation endpoints."""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from tumbi.api.deps import get_current_user
from tumbi.core.logging import get_logger
from tumbi.crud.conversation import conversation_crud
from tumbi.crud.listing import listing_crud
from tumbi.db.session import get_db
from tumbi.models.conversation import Conversation
from tumbi.models.user import User
from tumbi.schemas.chat import (
    ConversationCreate,
    ConversationResponse,
    ConversationSummary,
    MessageResponse,
)

logger = get_logger(__name__)
router = APIRouter()


async def get_participant_conversation(
    db: AsyncSession,
    conversation_id: int,
    user: User
) -> Conversation:
    """Load a conversation, refusing anyone who is not one of its two parties."""
    conversation = await conversation_crud.get(db, id=conversation_id)
    if not conversation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found."
        )
    if not conversation.has_participant(user.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not a participant in this conversation."
        )
    return conversation


def _summary(conversation: Conversation, last_message: Optional[str], user_id: int) -> ConversationSummary:
    other = conversation.seller if conversation.buyer_id == user_id else conversation.buyer
    images = conversation.listing.image_urls or []
    return ConversationSummary(
        conversation_id=conversation.id,
        listing_id=conversation.listing_id,
        listing_title=conversation.listing.title,
        listing_image=images[0] if images else None,
        other_user_id=other.id,
        other_user_name=other.name,
        other_user_image=other.avatar_url,
        last_message=last_message,
        last_message_at=conversation.last_message_at,
    )


@router.post("", response_model=ConversationResponse)
async def start_conversation(
    conversation_in: ConversationCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Open the caller's thread about a listing.

    Returns the existing thread (200) when there is one, otherwise creates
    it (201). A seller cannot open a thread on their own listing.
    """
    listing = await listing_crud.get(db, id=conversation_in.listing_id)
    if not listing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Listing not found."
        )
    if listing.user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot start a conversation with yourself."
        )

    conversation, created = await conversation_crud.get_or_create(
        db, listing=listing, buyer_id=current_user.id
    )
    if created:
        response.status_code = status.HTTP_201_CREATED
        logger.info(f"Conversation {conversation.id} opened on listing {listing.id}")
    return conversation


@router.get("", response_model=List[ConversationSummary])
async def list_conversations(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """The caller's inbox, most recent activity first."""
    rows = await conversation_crud.get_user_conversations(db, user_id=current_user.id)
    return [
        _summary(conversation, last_message, current_user.id)
        for conversation, last_message in rows
    ]


@router.get("/{conversation_id}/messages", response_model=List[MessageResponse])
async def list_messages(
    conversation_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Full transcript, oldest first."""
    conversation = await get_participant_conversation(db, conversation_id, current_user)
    return await conversation_crud.get_messages(db, conversation_id=conversation.id)
