"""Registration, login and session endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from tumbi.api.deps import get_current_user
from tumbi.core.config import settings
from tumbi.core.logging import get_logger
from tumbi.core.rate_limit import limiter
from tumbi.core.security import create_access_token
from tumbi.crud.user import user_crud
from tumbi.db.session import get_db
from tumbi.models.user import User
from tumbi.schemas.user import AuthResponse, LoginRequest, UserCreate, UserResponse

logger = get_logger(__name__)
router = APIRouter()

_CONFLICT_MESSAGES = {
    "email": "An account with this email already exists.",
    "phone": "An account with this phone number already exists.",
}


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(subject=user.id),
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def register(
    request: Request,
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Create an account and sign it in.

    Email and phone must both be unused.
    """
    conflict = await user_crud.find_conflict(db, email=user_in.email, phone=user_in.phone)
    if conflict:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=_CONFLICT_MESSAGES[conflict]
        )

    user = await user_crud.create(db, obj_in=user_in)
    logger.info(f"Registered user {user.id}")
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Exchange email (or phone) and password for an access token."""
    user = await user_crud.authenticate(
        db,
        password=credentials.password,
        email=credentials.email,
        phone=credentials.phone,
    )
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials."
        )

    return _auth_response(user)


@router.get("/me", response_model=UserResponse)
async def read_me(current_user: User = Depends(get_current_user)):
    """The signed-in user's profile."""
    return current_user
