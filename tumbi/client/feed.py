"""Incremental, filterable view over the listing feed."""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Set

from tumbi.client.api import TumbiClient
from tumbi.client.errors import ApiError
from tumbi.core.config import settings
from tumbi.core.logging import get_logger
from tumbi.schemas.listing import ListingResponse, SortKey, is_constrained

logger = get_logger(__name__)


@dataclass(frozen=True)
class FeedFilters:
    """The filter set of the home view. Defaults constrain nothing."""
    search: str = ""
    main_category: str = "all"
    sub_category: str = "all"
    city: str = "All Cities"
    sort_by: SortKey = SortKey.NEWEST

    def with_changes(self, **changes) -> "FeedFilters":
        return replace(self, **changes)

    def to_params(self) -> Dict[str, str]:
        """Query parameters for GET /listings; unconstrained values are left out."""
        params = {"sortBy": SortKey(self.sort_by).value}
        if self.search.strip():
            params["search"] = self.search.strip()
        if is_constrained(self.main_category):
            params["mainCategory"] = self.main_category
        if is_constrained(self.sub_category):
            params["subCategory"] = self.sub_category
        if is_constrained(self.city):
            params["city"] = self.city
        return params


class FeedPager:
    """
    Holds the feed pages loaded so far for one filter set.

    Pages are appended in arrival order, skipping listings whose id is
    already held. At most one page request is outstanding: ``load_more``
    is a no-op while a fetch is running or once a short page has shown the
    feed is exhausted. Changing filters or refreshing bumps a generation
    counter so a page still in flight for the old state is dropped when it
    lands.
    """

    def __init__(
        self,
        client: TumbiClient,
        filters: Optional[FeedFilters] = None,
        page_size: Optional[int] = None
    ):
        self.client = client
        self.filters = filters or FeedFilters()
        self.page_size = page_size or settings.FEED_PAGE_SIZE

        self.items: List[ListingResponse] = []
        self.offset = 0
        self.has_more = True
        self.loading = False
        self.last_error: Optional[ApiError] = None

        self._ids: Set[int] = set()
        self._generation = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def fetch_page(self, offset: int, filters: FeedFilters) -> List[ListingResponse]:
        """Issue exactly one bounded page request."""
        return await self.client.list_listings(
            offset=offset,
            limit=self.page_size,
            params=filters.to_params(),
        )

    async def set_filters(self, filters: FeedFilters) -> bool:
        """Switch filter set: drop everything held and load page 0."""
        self.filters = filters
        self._generation += 1
        self.items = []
        self._ids = set()
        self.offset = 0
        self.has_more = True
        return await self._load(reset=True)

    async def refresh(self) -> bool:
        """
        Replace the held collection with a fresh page 0.

        The old items stay visible until the new page arrives, and stay put
        if the fetch fails.
        """
        self._generation += 1
        return await self._load(reset=True)

    async def load_more(self) -> bool:
        """Append the next page, unless a fetch is running or the feed is exhausted."""
        if self._closed or self.loading or not self.has_more:
            return False
        return await self._load(reset=False)

    async def on_sentinel_visible(self) -> bool:
        """The trailing sentinel scrolled into view."""
        if self._closed:
            return False
        return await self.load_more()

    def close(self) -> None:
        """Detach the scroll trigger; any page in flight is discarded."""
        self._closed = True
        self._generation += 1
        self.loading = False

    async def _load(self, *, reset: bool) -> bool:
        generation = self._generation
        offset = 0 if reset else self.offset
        # Set before the first await so concurrent triggers see it
        self.loading = True
        try:
            page = await self.fetch_page(offset, self.filters)
        except ApiError as e:
            if generation == self._generation:
                self.last_error = e
            logger.warning(f"Feed page at offset {offset} failed: {e}")
            return False
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            logger.debug(f"Dropping stale feed page at offset {offset}")
            return False

        if reset:
            self.items = []
            self._ids = set()
        self._merge(page)
        self.offset = offset + len(page)
        self.has_more = len(page) == self.page_size
        self.last_error = None
        return True

    def _merge(self, page: List[ListingResponse]) -> None:
        for listing in page:
            if listing.id in self._ids:
                continue
            self._ids.add(listing.id)
            self.items.append(listing)
