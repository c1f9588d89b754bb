"""API v1 router - aggregates all endpoint routers."""

from fastapi import APIRouter

from tumbi.api.v1.endpoints import (
    auth,
    conversations,
    health,
    listings,
    messages,
    saved,
    upload,
    users,
)

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(listings.router, prefix="/listings", tags=["listings"])
api_router.include_router(saved.router, prefix="/saved", tags=["saved"])
api_router.include_router(conversations.router, prefix="/conversations", tags=["conversations"])
api_router.include_router(messages.router, prefix="/messages", tags=["messages"])
api_router.include_router(upload.router, prefix="/upload", tags=["upload"])
