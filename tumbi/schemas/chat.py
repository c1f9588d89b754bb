"""Conversation and message schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


# === Request Schemas ===

class ConversationCreate(BaseModel):
    """Open (or reopen) the thread about a listing."""
    listing_id: int


class MessageCreate(BaseModel):
    """Append a message. The receiver is the other participant."""
    conversation_id: int
    content: str = Field(..., min_length=1, max_length=4000)

    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "example": {
                "conversation_id": 7,
                "content": "Is the cement still available? I need 40 bags."
            }
        }
    }


# === Response Schemas ===

class ConversationResponse(BaseModel):
    """A conversation row."""
    id: int
    listing_id: int
    buyer_id: int
    seller_id: int
    created_at: datetime
    last_message_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ConversationSummary(BaseModel):
    """Inbox entry: the thread, who it is with, and its latest message."""
    conversation_id: int
    listing_id: int
    listing_title: str
    listing_image: Optional[str] = None
    other_user_id: int
    other_user_name: str
    other_user_image: Optional[str] = None
    last_message: Optional[str] = None
    last_message_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    """Response schema for a message."""
    id: int
    conversation_id: int
    sender_id: int
    receiver_id: int
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}
