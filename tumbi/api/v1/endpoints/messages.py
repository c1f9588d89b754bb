"""Message endpoint."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tumbi.api.deps import get_current_user
from tumbi.api.v1.endpoints.conversations import get_participant_conversation
from tumbi.crud.conversation import conversation_crud
from tumbi.db.session import get_db
from tumbi.models.user import User
from tumbi.schemas.chat import MessageCreate, MessageResponse

router = APIRouter()


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    message_in: MessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Append a message to a conversation the caller takes part in.

    The response carries the server timestamp that orders the transcript.
    """
    conversation = await get_participant_conversation(
        db, message_in.conversation_id, current_user
    )
    return await conversation_crud.add_message(
        db,
        conversation=conversation,
        sender_id=current_user.id,
        content=message_in.content,
    )
