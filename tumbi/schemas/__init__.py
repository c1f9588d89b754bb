"""Pydantic schemas for request/response validation."""

from tumbi.schemas.common import Message, ErrorResponse, UploadResponse
from tumbi.schemas.chat import (
    ConversationCreate,
    ConversationResponse,
    ConversationSummary,
    MessageCreate,
    MessageResponse,
)
from tumbi.schemas.listing import (
    SortKey,
    ListingCreate,
    ListingUpdate,
    ListingResponse,
    ListingCreated,
    VendorProfileResponse,
    SavedStatus,
)
from tumbi.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    PublicUserResponse,
    AuthResponse,
    LoginRequest,
)

__all__ = [
    "Message",
    "ErrorResponse",
    "UploadResponse",
    "ConversationCreate",
    "ConversationResponse",
    "ConversationSummary",
    "MessageCreate",
    "MessageResponse",
    "SortKey",
    "ListingCreate",
    "ListingUpdate",
    "ListingResponse",
    "ListingCreated",
    "VendorProfileResponse",
    "SavedStatus",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "PublicUserResponse",
    "AuthResponse",
    "LoginRequest",
]
