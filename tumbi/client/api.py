"""Async HTTP client for the Tumbi REST API."""

from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from tumbi.client.errors import ApiError, TransientError, ValidationFailed, error_for_status
from tumbi.client.session import SessionContext
from tumbi.core.config import settings
from tumbi.core.logging import get_logger
from tumbi.schemas.chat import ConversationResponse, ConversationSummary, MessageResponse
from tumbi.schemas.common import UploadResponse
from tumbi.schemas.listing import (
    ListingCreated,
    ListingResponse,
    SavedStatus,
    VendorProfileResponse,
)
from tumbi.schemas.user import AuthResponse, UserResponse

logger = get_logger(__name__)

# (filename, content, content type) as accepted by httpx multipart uploads
UploadFileSpec = Tuple[str, bytes, str]

ModelType = TypeVar("ModelType", bound=BaseModel)


class TumbiClient:
    """
    Thin typed wrapper over the REST API.

    The access token is read from the injected session on every request,
    so signing in or out takes effect immediately. Pass ``transport`` to
    run against an in-process app or a mock.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[SessionContext] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0
    ):
        self.session = session or SessionContext()
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "TumbiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        **kwargs
    ) -> Any:
        headers = kwargs.pop("headers", {})
        if self.session.token:
            headers[settings.TOKEN_HEADER] = self.session.token

        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise TransientError(f"{method} {path} failed: {e}") from e

        # Redirects are not followed, so a 3xx is a failure too
        if not response.is_success:
            logger.debug(f"{method} {path} -> {response.status_code}")
            raise error_for_status(response.status_code, _error_message(response))

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"{method} {path} returned a non-JSON body", response.status_code) from e

    # === Auth ===

    async def register(
        self,
        *,
        name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
        location: Optional[str] = None,
        company_name: Optional[str] = None
    ) -> UserResponse:
        """Create an account and store the new session."""
        data = await self._request("POST", "/auth/register", json={
            "name": name,
            "email": email,
            "password": password,
            "phone": phone,
            "location": location,
            "company_name": company_name,
        })
        return self._start_session(_parse(AuthResponse, data))

    async def login(
        self,
        *,
        password: str,
        email: Optional[str] = None,
        phone: Optional[str] = None
    ) -> UserResponse:
        """Sign in with email or phone and store the new session."""
        data = await self._request("POST", "/auth/login", json={
            "email": email,
            "phone": phone,
            "password": password,
        })
        return self._start_session(_parse(AuthResponse, data))

    def _start_session(self, auth: AuthResponse) -> UserResponse:
        self.session.save(auth.token, auth.user.model_dump(mode="json"))
        return auth.user

    async def me(self) -> UserResponse:
        return _parse(UserResponse, await self._request("GET", "/auth/me"))

    # === Users ===

    async def update_profile(self, profile: Dict[str, Any]) -> UserResponse:
        user = _parse(UserResponse, await self._request("PUT", "/users/me", json=profile))
        self.session.update_user(user.model_dump(mode="json"))
        return user

    async def vendor_profile(self, user_id: int) -> VendorProfileResponse:
        return _parse(VendorProfileResponse, await self._request("GET", f"/users/{user_id}"))

    # === Listings ===

    async def list_listings(
        self,
        *,
        offset: int = 0,
        limit: int = settings.FEED_PAGE_SIZE,
        params: Optional[Dict[str, str]] = None
    ) -> List[ListingResponse]:
        """One page of the feed; ``params`` carries the filter query."""
        query = {"limit": limit, "offset": offset, **(params or {})}
        data = await self._request("GET", "/listings", params=query)
        return _parse_list(ListingResponse, data)

    async def get_listing(self, listing_id: int) -> ListingResponse:
        return _parse(ListingResponse, await self._request("GET", f"/listings/{listing_id}"))

    async def get_listing_by_slug(self, slug: str) -> ListingResponse:
        path = f"/listings/slug/{quote(slug, safe='')}"
        return _parse(ListingResponse, await self._request("GET", path))

    async def create_listing(self, listing: Dict[str, Any]) -> ListingCreated:
        return _parse(ListingCreated, await self._request("POST", "/listings", json=listing))

    async def update_listing(self, listing_id: int, listing: Dict[str, Any]) -> ListingCreated:
        data = await self._request("PUT", f"/listings/{listing_id}", json=listing)
        return _parse(ListingCreated, data)

    async def delete_listing(self, listing_id: int) -> None:
        await self._request("DELETE", f"/listings/{listing_id}")

    # === Saved ===

    async def saved_listings(self) -> List[ListingResponse]:
        data = await self._request("GET", "/saved")
        return _parse_list(ListingResponse, data)

    async def is_saved(self, listing_id: int) -> bool:
        data = await self._request("GET", f"/saved/{listing_id}")
        return _parse(SavedStatus, data).is_saved

    async def save(self, listing_id: int) -> None:
        await self._request("POST", f"/saved/{listing_id}")

    async def unsave(self, listing_id: int) -> None:
        await self._request("DELETE", f"/saved/{listing_id}")

    # === Conversations ===

    async def start_conversation(self, listing_id: int) -> ConversationResponse:
        data = await self._request("POST", "/conversations", json={"listing_id": listing_id})
        return _parse(ConversationResponse, data)

    async def conversations(self) -> List[ConversationSummary]:
        data = await self._request("GET", "/conversations")
        return _parse_list(ConversationSummary, data)

    async def messages(self, conversation_id: int) -> List[MessageResponse]:
        data = await self._request("GET", f"/conversations/{conversation_id}/messages")
        return _parse_list(MessageResponse, data)

    async def send_message(self, conversation_id: int, content: str) -> MessageResponse:
        data = await self._request("POST", "/messages", json={
            "conversation_id": conversation_id,
            "content": content,
        })
        return _parse(MessageResponse, data)

    # === Uploads ===

    async def upload(self, files: Iterable[UploadFileSpec]) -> List[str]:
        """Upload images and return their public URLs in order."""
        parts = [("photos", file) for file in files]
        if not parts:
            raise ValidationFailed("No files were uploaded.")
        data = await self._request("POST", "/upload", files=parts)
        return _parse(UploadResponse, data).urls


def _parse(model: Type[ModelType], data: Any) -> ModelType:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ApiError(f"Unexpected {model.__name__} payload: {e.error_count()} errors") from e


def _parse_list(model: Type[ModelType], data: Any) -> List[ModelType]:
    if not isinstance(data, list):
        raise ApiError(f"Expected a list of {model.__name__}, got {type(data).__name__}")
    return [_parse(model, item) for item in data]


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    detail = data.get("detail") if isinstance(data, dict) else None
    if isinstance(detail, list):
        # FastAPI validation errors
        return "; ".join(str(item.get("msg", item)) for item in detail)
    return str(detail) if detail else response.reason_phrase
