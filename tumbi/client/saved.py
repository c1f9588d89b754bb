"""Optimistic saved-set with rollback on failure."""

import asyncio
from typing import Callable, Dict, Optional, Set

from tumbi.client.api import TumbiClient
from tumbi.client.errors import ApiError
from tumbi.core.logging import get_logger

logger = get_logger(__name__)


class SavedSet:
    """
    The ids of the listings the signed-in user has saved.

    ``toggle`` flips membership locally at once and sends the request in the
    background. If the request fails the flip is undone, unless any later
    toggle of the same listing (or a ``sync``) has happened since. ``sync``
    replaces local membership with the server's saved set.
    """

    def __init__(
        self,
        client: TumbiClient,
        on_error: Optional[Callable[[ApiError], None]] = None
    ):
        self.client = client
        self.on_error = on_error
        self.ids: Set[int] = set()
        self._tasks: Set[asyncio.Task] = set()
        # Per-listing count of local changes; a failed request only rolls
        # back if its toggle is still the latest one
        self._versions: Dict[int, int] = {}

    def __contains__(self, listing_id: int) -> bool:
        return listing_id in self.ids

    def __len__(self) -> int:
        return len(self.ids)

    def toggle(self, listing_id: int) -> asyncio.Task:
        """Flip membership now; returns the task carrying the request."""
        saved = listing_id not in self.ids
        if saved:
            self.ids.add(listing_id)
        else:
            self.ids.discard(listing_id)
        version = self._bump(listing_id)

        task = asyncio.create_task(self._commit(listing_id, saved, version))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def sync(self) -> bool:
        """Adopt the server's saved set. On failure local state is kept."""
        try:
            listings = await self.client.saved_listings()
        except ApiError as e:
            logger.warning(f"Saved-set sync failed: {e}")
            return False
        self.ids = {listing.id for listing in listings}
        for listing_id in self._versions:
            self._bump(listing_id)
        return True

    async def wait(self) -> None:
        """Wait for every toggle still in flight."""
        if self._tasks:
            await asyncio.gather(*self._tasks)

    def clear(self) -> None:
        self.ids = set()
        for listing_id in self._versions:
            self._bump(listing_id)

    def _bump(self, listing_id: int) -> int:
        self._versions[listing_id] = self._versions.get(listing_id, 0) + 1
        return self._versions[listing_id]

    async def _commit(self, listing_id: int, saved: bool, version: int) -> bool:
        try:
            if saved:
                await self.client.save(listing_id)
            else:
                await self.client.unsave(listing_id)
        except ApiError as e:
            logger.warning(f"{'Save' if saved else 'Unsave'} of listing {listing_id} failed: {e}")
            if self._versions.get(listing_id) == version:
                if saved:
                    self.ids.discard(listing_id)
                else:
                    self.ids.add(listing_id)
            if self.on_error:
                self.on_error(e)
            return False
        return True
