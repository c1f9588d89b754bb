"""Shared endpoint dependencies."""

from typing import Optional
from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tumbi.core.security import token_header, user_id_from_token
from tumbi.crud.user import user_crud
from tumbi.db.session import get_db
from tumbi.models.user import User


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail
    )


async def get_current_user(
    token: Optional[str] = Depends(token_header),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Resolve the caller from the access token header.

    The three failure cases differ only in their message.
    """
    if not token:
        raise _unauthorized("No token provided.")

    user_id = user_id_from_token(token)
    if user_id is None:
        raise _unauthorized("Your session is invalid. Please log in again.")

    user = await user_crud.get(db, id=user_id)
    if not user:
        raise _unauthorized("User not found. Please log in again.")

    return user
