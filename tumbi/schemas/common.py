"""Common schemas used across the application."""

from typing import List, Optional
from pydantic import BaseModel


class Message(BaseModel):
    """Generic message response."""
    message: str


class ErrorResponse(BaseModel):
    """Error response schema."""
    detail: str
    error: Optional[str] = None


class UploadResponse(BaseModel):
    """Public URLs of freshly stored images, in submission order."""
    message: str
    urls: List[str]
