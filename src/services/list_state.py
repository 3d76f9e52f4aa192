# src/services/list_state.py

"""Pagination, filter and sort state of the product list.

The state is an immutable snapshot.  Every change goes through
:func:`reduce`, which takes the current snapshot and an event and returns
the next snapshot.  Async completions in the controller only ever
dispatch events.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Union

from src.config.settings import Settings
from src.models.product import Product, ProductPage
from src.models.sort_option import SortOption


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class LoadMode(str, Enum):
    """Whether a fetch replaces or extends the accumulated products."""

    RESET = "reset"
    APPEND = "append"


@dataclass(frozen=True)
class ListState:
    """Snapshot of everything the list screen renders."""

    products: tuple[Product, ...] = ()
    categories: tuple[str, ...] = ()
    selected_category: str | None = None
    search_query: str | None = None
    sort_option: SortOption = SortOption(Settings.DEFAULT_SORT)
    page: int = 0
    has_more: bool = True
    status: LoadStatus = LoadStatus.IDLE
    load_mode: LoadMode | None = None
    is_loading: bool = False
    is_refreshing: bool = False
    error: str | None = None
    error_status: int | None = None
    # Sequence number of the most recently issued reset fetch
    reset_seq: int = 0

    @property
    def is_busy(self) -> bool:
        return self.is_loading or self.is_refreshing

    @property
    def show_spinner(self) -> bool:
        """Full-screen indicator: reset loads only, never refreshes."""
        return self.is_loading and self.load_mode is LoadMode.RESET

    @property
    def show_footer_spinner(self) -> bool:
        return self.is_loading and self.load_mode is LoadMode.APPEND

    @property
    def show_error_view(self) -> bool:
        """Replace the list with an error view when nothing is visible."""
        return self.status is LoadStatus.ERROR and not self.products


# ── Events ───────────────────────────────────────────────


@dataclass(frozen=True)
class LoadStarted:
    mode: LoadMode
    refreshing: bool = False


@dataclass(frozen=True)
class PageLoaded:
    page: ProductPage
    page_index: int
    requested_limit: int
    mode: LoadMode


@dataclass(frozen=True)
class LoadFailed:
    message: str
    mode: LoadMode
    status_code: int | None = None


@dataclass(frozen=True)
class CategoriesLoaded:
    categories: tuple[str, ...]


@dataclass(frozen=True)
class CategorySelected:
    category: str | None


@dataclass(frozen=True)
class SearchSubmitted:
    query: str | None


@dataclass(frozen=True)
class SortChanged:
    option: SortOption


ListEvent = Union[
    LoadStarted,
    PageLoaded,
    LoadFailed,
    CategoriesLoaded,
    CategorySelected,
    SearchSubmitted,
    SortChanged,
]


# ── Transitions ──────────────────────────────────────────


def _load_started(state: ListState, event: LoadStarted) -> ListState:
    if event.mode is LoadMode.RESET:
        return replace(
            state,
            status=LoadStatus.LOADING,
            load_mode=LoadMode.RESET,
            is_loading=not event.refreshing,
            is_refreshing=event.refreshing,
            error=None,
            error_status=None,
            reset_seq=state.reset_seq + 1,
        )
    return replace(
        state,
        status=LoadStatus.LOADING,
        load_mode=LoadMode.APPEND,
        is_loading=True,
    )


def _page_loaded(state: ListState, event: PageLoaded) -> ListState:
    fetched = event.page.products
    if event.mode is LoadMode.RESET:
        products = tuple(fetched)
    else:
        products = state.products + tuple(fetched)
    return replace(
        state,
        products=products,
        page=event.page_index,
        # Heuristic end-of-list: a short page is the last page
        has_more=len(fetched) == event.requested_limit,
        status=LoadStatus.LOADED,
        load_mode=None,
        is_loading=False,
        is_refreshing=False,
        error=None,
        error_status=None,
    )


def _load_failed(state: ListState, event: LoadFailed) -> ListState:
    failed = replace(
        state,
        status=LoadStatus.ERROR,
        load_mode=None,
        is_loading=False,
        is_refreshing=False,
        error=event.message,
        error_status=event.status_code,
    )
    if event.mode is LoadMode.RESET and not state.is_refreshing:
        # The previous filter's products no longer match the selection
        return replace(failed, products=(), page=0, has_more=False)
    return failed


def reduce(state: ListState, event: ListEvent) -> ListState:
    """Return the state that follows *state* after *event*."""
    if isinstance(event, LoadStarted):
        return _load_started(state, event)
    if isinstance(event, PageLoaded):
        return _page_loaded(state, event)
    if isinstance(event, LoadFailed):
        return _load_failed(state, event)
    if isinstance(event, CategoriesLoaded):
        return replace(state, categories=tuple(event.categories))
    if isinstance(event, CategorySelected):
        return replace(
            state, selected_category=event.category or None, search_query=None
        )
    if isinstance(event, SearchSubmitted):
        return replace(
            state, search_query=event.query or None, selected_category=None
        )
    if isinstance(event, SortChanged):
        return replace(state, sort_option=event.option)
    raise TypeError(f"Unknown list event: {event!r}")
