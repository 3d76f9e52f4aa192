# src/services/product_list_controller.py

"""Drives the product list: pagination, filtering and sorting."""

import asyncio
import logging
from collections.abc import Callable

from src.api.catalog_client import CatalogClient
from src.api.errors import CatalogApiError
from src.config.settings import Settings
from src.filters.product_sorter import ProductSorter
from src.models.product import Product, ProductPage
from src.models.sort_option import SortOption
from src.services.list_state import (
    CategoriesLoaded,
    CategorySelected,
    ListEvent,
    ListState,
    LoadFailed,
    LoadMode,
    LoadStarted,
    PageLoaded,
    SearchSubmitted,
    SortChanged,
    reduce,
)

logger = logging.getLogger("catalog_browser.list")

_GENERIC_LOAD_ERROR = "Failed to load products. Please try again."

StateListener = Callable[[ListState], None]


class ProductListController:
    """Owns the list state and issues fetches against the catalog API.

    Results are applied in completion order.  Overlapping fetches are
    not fenced: a slow earlier reset that finishes last overwrites the
    newer selection's products, and a load-more that outlives a filter
    change is appended to the new filter's list.  Such stale
    applications are logged.
    """

    def __init__(
        self,
        client: CatalogClient,
        page_size: int | None = None,
        fallback_categories: list[str] | None = None,
    ) -> None:
        self.client = client
        self.page_size = page_size or Settings.PAGE_SIZE
        self.fallback_categories = (
            fallback_categories
            if fallback_categories is not None
            else Settings.FALLBACK_CATEGORIES
        )
        self.state = ListState()
        self._listeners: list[StateListener] = []

    # ── State plumbing ───────────────────────────────────

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register *listener* for state changes; returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: ListEvent) -> ListState:
        """Apply *event* to the state and notify listeners."""
        self.state = reduce(self.state, event)
        logger.debug("%s -> %s", type(event).__name__, self.state.status.value)
        for listener in list(self._listeners):
            listener(self.state)
        return self.state

    @property
    def visible_products(self) -> list[Product]:
        """Accumulated products in the selected sort order."""
        return ProductSorter.sort(self.state.products, self.state.sort_option)

    # ── Fetching ─────────────────────────────────────────

    async def _fetch(
        self,
        page_index: int,
        category: str | None,
        query: str | None,
    ) -> ProductPage:
        offset = page_index * self.page_size
        if query:
            return await self.client.search_products(
                query, offset, self.page_size
            )
        return await self.client.list_products(
            offset, self.page_size, category
        )

    async def _load_page(
        self,
        page_index: int,
        mode: LoadMode,
        refreshing: bool = False,
    ) -> None:
        """Fetch one page and dispatch its outcome."""
        category = self.state.selected_category
        query = self.state.search_query
        self.dispatch(LoadStarted(mode=mode, refreshing=refreshing))
        seq = self.state.reset_seq

        try:
            page = await self._fetch(page_index, category, query)
        except CatalogApiError as exc:
            logger.error(
                "Error loading page %d (category=%s, query=%s): %s",
                page_index,
                category,
                query,
                exc.message,
            )
            self.dispatch(
                LoadFailed(
                    message=exc.message,
                    mode=mode,
                    status_code=exc.status_code,
                )
            )
            return
        except Exception:
            logger.error(
                "Unexpected error loading page %d", page_index, exc_info=True
            )
            self.dispatch(LoadFailed(message=_GENERIC_LOAD_ERROR, mode=mode))
            return

        if seq != self.state.reset_seq:
            # TODO: fence superseded results by sequence number instead of applying them
            logger.warning(
                "Applying superseded %s result (request %d, latest %d, "
                "category=%s, query=%s)",
                mode.value,
                seq,
                self.state.reset_seq,
                category,
                query,
            )
        self.dispatch(
            PageLoaded(
                page=page,
                page_index=page_index,
                requested_limit=self.page_size,
                mode=mode,
            )
        )

    async def load_categories(self) -> None:
        """Fetch categories, substituting the fallback list on failure."""
        try:
            categories = await self.client.list_categories()
        except Exception as exc:
            logger.warning(
                "Error loading categories, using fallback list: %s", exc
            )
            categories = list(self.fallback_categories)
        self.dispatch(CategoriesLoaded(categories=tuple(categories)))

    # ── Operations ───────────────────────────────────────

    async def initialize(self, category: str | None = None) -> None:
        """Load categories and the first page.

        *category* pre-selects a filter, e.g. when opened from a
        category deep link.
        """
        if category:
            self.dispatch(CategorySelected(category=category))
        await asyncio.gather(
            self.load_categories(),
            self._load_page(0, LoadMode.RESET),
        )

    async def refresh(self) -> None:
        """Pull-to-refresh: reload page 0 without the full-screen spinner."""
        await self._load_page(0, LoadMode.RESET, refreshing=True)

    async def select_category(self, category: str | None) -> None:
        """Filter by *category* (``None`` for all) and reload from page 0."""
        self.dispatch(CategorySelected(category=category))
        await self._load_page(0, LoadMode.RESET)

    async def search(self, query: str | None) -> None:
        """Replace the category filter with a free-text search."""
        query = (query or "").strip()
        if not query:
            await self.select_category(None)
            return
        self.dispatch(SearchSubmitted(query=query))
        await self._load_page(0, LoadMode.RESET)

    def change_sort(self, option: SortOption | str) -> None:
        """Change the sort order locally; never fetches."""
        resolved = SortOption.parse(option)
        if resolved is None:
            logger.warning("Ignoring unknown sort option %r", option)
            return
        self.dispatch(SortChanged(option=resolved))

    async def load_more(self) -> bool:
        """Append the next page.

        Returns ``False`` without fetching while a load is in flight or
        once the last page has been seen.
        """
        if self.state.is_busy or not self.state.has_more:
            return False
        await self._load_page(self.state.page + 1, LoadMode.APPEND)
        return True

    async def retry(self) -> None:
        """Re-issue the page 0 fetch for the current filters."""
        await self._load_page(0, LoadMode.RESET)
