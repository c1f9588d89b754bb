"""Client state controller: session, feed, saved set, navigation and chat."""

import asyncio
from typing import Any, Dict, Optional

from tumbi.client.api import TumbiClient
from tumbi.client.errors import ApiError, AuthenticationRequired
from tumbi.client.feed import FeedFilters, FeedPager
from tumbi.client.poller import ConversationPoller
from tumbi.client.saved import SavedSet
from tumbi.client.session import SessionContext
from tumbi.client.views import Navigator, View, ViewKind
from tumbi.core.logging import get_logger
from tumbi.schemas.listing import ListingCreated, ListingResponse
from tumbi.schemas.user import UserResponse

logger = get_logger(__name__)


class AppController:
    """
    Owns every piece of client state and wires them to the API.

    Failure policy: an ``AuthenticationRequired`` clears the session and
    raises the auth prompt; any other ``ApiError`` becomes a dismissible
    ``notice``. Mutations of listings are followed by a feed refresh
    rather than patching the held collection in place.
    """

    def __init__(
        self,
        client: TumbiClient,
        *,
        page_size: Optional[int] = None,
        poll_interval: Optional[float] = None
    ):
        self.client = client
        self.session: SessionContext = client.session
        self.feed = FeedPager(client, page_size=page_size)
        self.saved = SavedSet(client, on_error=self.handle_error)
        self.navigator = Navigator(self.session)
        self.poll_interval = poll_interval

        self.poller: Optional[ConversationPoller] = None
        self.listing: Optional[ListingResponse] = None
        self.notice: Optional[str] = None

    @property
    def view(self) -> View:
        return self.navigator.current

    @property
    def auth_prompt(self) -> bool:
        return self.navigator.auth_prompt

    # === Lifecycle ===

    async def startup(self, deep_link: Optional[str] = None) -> None:
        """Restore the session, load the first feed page and the saved set."""
        if self.session.load():
            try:
                user = await self.client.me()
            except AuthenticationRequired:
                logger.info("Stored session rejected; signing out")
                self.session.clear()
            except ApiError as e:
                # Keep the stored session; the server may just be unreachable
                logger.warning(f"Could not verify stored session: {e}")
            else:
                self.session.update_user(user.model_dump(mode="json"))

        await self.feed.refresh()
        if self.session.is_authenticated:
            await self.saved.sync()
        if deep_link:
            await self.resolve_deep_link(deep_link)

    async def shutdown(self) -> None:
        self.feed.close()
        await self._stop_poller()
        await self.saved.wait()

    # === Errors ===

    def handle_error(self, exc: ApiError) -> None:
        if isinstance(exc, AuthenticationRequired):
            self.session.clear()
            self.saved.clear()
            self.navigator.auth_prompt = True
            self.notice = exc.message
        else:
            self.notice = exc.message

    def dismiss_notice(self) -> None:
        self.notice = None

    async def _guarded(self, coro):
        try:
            return await coro
        except ApiError as e:
            logger.warning(f"Request failed: {e}")
            self.handle_error(e)
            return None

    # === Auth ===

    async def login(self, *, password: str, email: Optional[str] = None,
                    phone: Optional[str] = None) -> Optional[UserResponse]:
        user = await self._guarded(
            self.client.login(password=password, email=email, phone=phone)
        )
        if user:
            self.navigator.dismiss_auth_prompt()
            await self.saved.sync()
        return user

    async def register(self, **fields) -> Optional[UserResponse]:
        user = await self._guarded(self.client.register(**fields))
        if user:
            self.navigator.dismiss_auth_prompt()
            self.saved.clear()
        return user

    async def logout(self) -> None:
        await self._stop_poller()
        self.session.clear()
        self.saved.clear()
        self.navigator.reset()

    # === Navigation ===

    async def navigate(self, target: View) -> bool:
        """
        Move to ``target`` and run its entry work: the Saved view re-syncs
        the saved set, a conversation starts polling and leaving one stops it.
        """
        leaving_chat = self.view.kind == ViewKind.CONVERSATION
        if not self.navigator.navigate(target):
            return False

        if leaving_chat:
            await self._stop_poller()

        if target.kind == ViewKind.SAVED:
            await self.saved.sync()
        elif target.kind == ViewKind.CONVERSATION:
            await self._start_poller(target.conversation_id)
        return True

    async def back(self) -> View:
        if self.view.kind == ViewKind.CONVERSATION:
            await self._stop_poller()
        return self.navigator.back()

    async def open_listing(self, listing_id: int) -> bool:
        listing = await self._guarded(self.client.get_listing(listing_id))
        if not listing:
            return False
        self.listing = listing
        return await self.navigate(View.details(listing_id))

    async def resolve_deep_link(self, ref: str) -> bool:
        """
        Open a shared listing by id or share slug.

        Never raises: any failure lands on the home view.
        """
        ref = ref.strip().strip("/")
        if not ref:
            self.navigator.reset()
            return False
        try:
            if ref.isascii() and ref.isdigit():
                listing = await self.client.get_listing(int(ref))
            else:
                listing = await self.client.get_listing_by_slug(ref)
        except ApiError as e:
            logger.warning(f"Deep link {ref!r} could not be resolved: {e}")
            self.navigator.reset()
            return False

        self.listing = listing
        self.navigator.reset()
        self.navigator.navigate(View.details(listing.id))
        return True

    # === Feed ===

    async def set_filters(self, **changes) -> bool:
        return await self.feed.set_filters(self.feed.filters.with_changes(**changes))

    async def reset_filters(self) -> bool:
        return await self.feed.set_filters(FeedFilters())

    # === Listings ===

    async def create_listing(self, listing: Dict[str, Any]) -> Optional[ListingCreated]:
        created = await self._guarded(self.client.create_listing(listing))
        if created:
            await self.feed.refresh()
        return created

    async def update_listing(self, listing_id: int, listing: Dict[str, Any]) -> Optional[ListingCreated]:
        updated = await self._guarded(self.client.update_listing(listing_id, listing))
        if updated:
            await self.feed.refresh()
        return updated

    async def delete_listing(self, listing_id: int) -> bool:
        try:
            await self.client.delete_listing(listing_id)
        except ApiError as e:
            logger.warning(f"Delete of listing {listing_id} failed: {e}")
            self.handle_error(e)
            return False
        self.saved.ids.discard(listing_id)
        await self.feed.refresh()
        return True

    # === Saved ===

    def toggle_save(self, listing_id: int) -> Optional[asyncio.Task]:
        """Optimistic save/unsave. Signed-out users get the auth prompt."""
        if not self.session.is_authenticated:
            self.navigator.auth_prompt = True
            return None
        return self.saved.toggle(listing_id)

    # === Chat ===

    async def open_chat(self, listing_id: int) -> bool:
        """Open (or create) the conversation about a listing and show it."""
        if not self.session.is_authenticated:
            self.navigator.auth_prompt = True
            return False
        conversation = await self._guarded(self.client.start_conversation(listing_id))
        if not conversation:
            return False
        return await self.navigate(View.conversation(conversation.id))

    async def send_message(self, content: Optional[str] = None) -> bool:
        """Send through the active poller; the draft survives a failure."""
        if not self.poller:
            return False
        try:
            message = await self.poller.send(content)
        except ApiError as e:
            self.handle_error(e)
            return False
        return message is not None

    async def _start_poller(self, conversation_id: int) -> None:
        await self._stop_poller()
        self.poller = ConversationPoller(
            self.client, conversation_id, interval=self.poll_interval
        )
        await self.poller.start()

    async def _stop_poller(self) -> None:
        poller, self.poller = self.poller, None
        if poller:
            await poller.stop()
