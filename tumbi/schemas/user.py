"""User and authentication schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, model_validator

from tumbi.models.user import UserRole


class UserBase(BaseModel):
    """Base user schema."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, min_length=3, max_length=32)
    company_name: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)


class UserCreate(UserBase):
    """Schema for registering a user."""
    password: str = Field(..., min_length=6, max_length=100)


class UserUpdate(UserBase):
    """Profile edit. Replaces every editable field."""
    avatar_url: Optional[str] = Field(None, max_length=1024)


class UserResponse(UserBase):
    """The signed-in user's own profile."""
    id: int
    role: UserRole
    avatar_url: Optional[str] = None
    is_verified: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class PublicUserResponse(BaseModel):
    """What other users see of a seller."""
    id: int
    name: str
    company_name: Optional[str] = None
    location: Optional[str] = None
    avatar_url: Optional[str] = None
    is_verified: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Token plus the user it was issued for."""
    auth: bool = True
    token: str
    user: UserResponse


class LoginRequest(BaseModel):
    """Login with either email or phone."""
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def require_identifier(self) -> "LoginRequest":
        if not self.email and not self.phone:
            raise ValueError("Email or phone is required")
        return self

