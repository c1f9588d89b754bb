"""Async client and client-side state for the Tumbi API."""

from tumbi.client.api import TumbiClient
from tumbi.client.controller import AppController
from tumbi.client.errors import (
    ApiError,
    AuthenticationRequired,
    Conflict,
    Forbidden,
    NotFound,
    TransientError,
    ValidationFailed,
)
from tumbi.client.feed import FeedFilters, FeedPager
from tumbi.client.poller import ConversationPoller
from tumbi.client.saved import SavedSet
from tumbi.client.session import SessionContext
from tumbi.client.views import InvalidTransition, Navigator, View, ViewKind

__all__ = [
    "TumbiClient",
    "AppController",
    "ApiError",
    "AuthenticationRequired",
    "Conflict",
    "Forbidden",
    "NotFound",
    "TransientError",
    "ValidationFailed",
    "FeedFilters",
    "FeedPager",
    "ConversationPoller",
    "SavedSet",
    "SessionContext",
    "InvalidTransition",
    "Navigator",
    "View",
    "ViewKind",
]
