"""CRUD operations for database models."""

from tumbi.crud.base import CRUDBase
from tumbi.crud.user import user_crud
from tumbi.crud.listing import listing_crud
from tumbi.crud.saved import saved_crud
from tumbi.crud.conversation import conversation_crud

__all__ = [
    "CRUDBase",
    "user_crud",
    "listing_crud",
    "saved_crud",
    "conversation_crud",
]
