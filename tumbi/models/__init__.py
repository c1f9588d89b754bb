"""SQLAlchemy models for the Tumbi marketplace."""

from tumbi.models.user import User, UserRole
from tumbi.models.listing import Listing
from tumbi.models.saved_listing import SavedListing
from tumbi.models.conversation import Conversation, Message

__all__ = [
    "User",
    "UserRole",
    "Listing",
    "SavedListing",
    "Conversation",
    "Message",
]
