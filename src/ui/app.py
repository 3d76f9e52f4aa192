# src/ui/app.py

"""Terminal UI for browsing the product catalog."""

import logging
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    LoadingIndicator,
    Select,
    Static,
)

from src.api.catalog_client import CatalogClient
from src.config.settings import Settings
from src.models.intent import ProductDetailIntent, ProductListIntent
from src.models.product import Product
from src.models.sort_option import SortOption
from src.navigation.deep_links import (
    create_deep_link,
    handle_deep_link,
    parse_deep_link,
)
from src.reminders.calendar_store import IcsCalendarStore
from src.reminders.notifier import ScheduledNotifier
from src.reminders.reminder_service import PurchaseReminderService
from src.services.list_state import ListState, LoadStatus
from src.services.product_list_controller import ProductListController
from src.ui.detail_screen import ProductDetailScreen
from src.ui.formatting import format_discount, format_price, format_rating

logger = logging.getLogger("catalog_browser.ui")

# Select value standing in for "no category filter"
ALL_CATEGORIES = ""

# Actions that only make sense while the list is the active screen
_LIST_ACTIONS = frozenset(
    {"refresh", "load_more", "cycle_sort", "copy_link"}
)


class CatalogApp(App[object]):
    """Product list screen plus navigation to product details.

    The app is also the navigator that deep links dispatch to.
    """

    CSS_PATH = "styles.css"
    TITLE = "Products"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("m", "load_more", "More"),
        Binding("s", "cycle_sort", "Sort"),
        Binding("c", "copy_link", "Copy link"),
    ]

    def __init__(
        self,
        client: CatalogClient | None = None,
        reminders: PurchaseReminderService | None = None,
        start_link: str | None = None,
    ) -> None:
        super().__init__()
        self.settings = Settings()
        self._owns_client = client is None
        self.client = client or CatalogClient()
        self.notifier = ScheduledNotifier(self._deliver_reminder)
        self.reminders = reminders or PurchaseReminderService(
            IcsCalendarStore(), self.notifier
        )
        self.controller = ProductListController(self.client)
        self.start_link = start_link
        self._category_options: tuple[str, ...] | None = None
        self._last_error: str | None = None
        self._rendered: list[Product] = []

    # ── Layout ───────────────────────────────────────────

    def compose(self) -> ComposeResult:
        """Build the widget tree for the list screen."""
        sort_options = [(o.label, o.value) for o in SortOption]

        yield Header()
        yield Container(
            Horizontal(
                Select(
                    [("All categories", ALL_CATEGORIES)],
                    allow_blank=False,
                    value=ALL_CATEGORIES,
                    id="category_select",
                ),
                Select(
                    sort_options,
                    allow_blank=False,
                    value=self.controller.state.sort_option.value,
                    id="sort_select",
                ),
                id="filter_bar",
            ),
            Horizontal(
                Input(placeholder="Search products...", id="search_input"),
                Input(
                    placeholder=f"{self.settings.DEEP_LINK_SCHEME}://product/1",
                    id="link_input",
                ),
                id="search_bar",
            ),
            Static("Ready", id="status"),
            LoadingIndicator(id="spinner"),
            Vertical(
                Static(id="error_message"),
                Button("Retry", variant="primary", id="retry_btn"),
                id="error_view",
            ),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="product_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure the table and kick off the first load."""
        table = self._table()
        table.add_columns("Title", "Price", "Rating", "Category")
        self.controller.subscribe(self.render_list_state)
        self.render_list_state(self.controller.state)

        intent = parse_deep_link(self.start_link) if self.start_link else None
        if self.start_link and intent is None:
            self.notify(
                f"Unrecognised link: {self.start_link}", severity="warning"
            )
        category = (
            intent.category if isinstance(intent, ProductListIntent) else None
        )
        self.run_worker(self.controller.initialize(category), group="list")
        if isinstance(intent, ProductDetailIntent):
            self.open_product_detail(intent.product_id)

    async def on_unmount(self) -> None:
        self.notifier.cancel_all()
        if self._owns_client:
            await self.client.close()

    def _table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#product_table", DataTable),
        )

    # ── Rendering ────────────────────────────────────────

    def render_list_state(self, state: ListState) -> None:
        """Reflect the list state in the widgets."""
        self.query_one("#spinner", LoadingIndicator).display = state.show_spinner
        self.query_one("#error_view").display = state.show_error_view
        self._table().display = not (
            state.show_spinner or state.show_error_view
        )
        if state.show_error_view:
            self.query_one("#error_message", Static).update(
                f"❌ {state.error}"
            )
        elif state.error and state.error != self._last_error:
            self.notify(state.error, severity="error")
        self._last_error = state.error

        self._sync_category_options(state)
        self.query_one("#status", Static).update(self._status_text(state))
        self.sub_title = (
            state.selected_category
            or (f"“{state.search_query}”" if state.search_query else "")
        )
        self.populate_table()

    @staticmethod
    def _status_text(state: ListState) -> str:
        if state.is_refreshing:
            return "🔄 Refreshing..."
        if state.show_footer_spinner:
            return f"⏳ Loading more products... ({len(state.products)} loaded)"
        if state.show_spinner:
            return "🔍 Loading products..."
        if state.show_error_view:
            return "❌ Failed to load products"
        if not state.products:
            if state.status is LoadStatus.IDLE:
                return "Ready"
            return "No products found"
        end = "" if state.has_more else " (end of list)"
        return (
            f"✅ {len(state.products)} products, "
            f"{state.sort_option.label}{end}"
        )

    def _sync_category_options(self, state: ListState) -> None:
        """Refresh the category select when the vocabulary changes."""
        select = cast(
            Select[str], self.query_one("#category_select", Select)
        )
        names = list(state.categories)
        if state.selected_category and state.selected_category not in names:
            names.append(state.selected_category)
        with select.prevent(Select.Changed):
            if tuple(names) != self._category_options:
                self._category_options = tuple(names)
                select.set_options(
                    [("All categories", ALL_CATEGORIES)]
                    + [(name, name) for name in names]
                )
            wanted = state.selected_category or ALL_CATEGORIES
            if select.value != wanted:
                select.value = wanted

    def populate_table(self) -> None:
        """Fill the DataTable with the visible (sorted) products.

        The table is only rebuilt when the visible list changes; the
        cursor stays on the product it was on.
        """
        products = self.controller.visible_products
        if products == self._rendered:
            return
        table = self._table()
        row = table.cursor_row
        highlighted = (
            self._rendered[row].id
            if 0 <= row < len(self._rendered)
            else None
        )

        table.clear()
        for p in products:
            price = Text(format_price(p.price), style="green")
            discount = format_discount(p.discount_percentage)
            if discount:
                price.append(f" {discount}", style="red")
            table.add_row(
                p.title[:60],
                price,
                f"⭐ {format_rating(p.rating)}",
                p.category or "",
            )
        self._rendered = products

        ids = [p.id for p in products]
        if highlighted in ids and ids.index(highlighted) > 0:
            table.move_cursor(row=ids.index(highlighted))

    # ── Events ───────────────────────────────────────────

    async def on_select_changed(self, event: Select.Changed) -> None:
        """Apply category or sort changes from the filter bar."""
        value = event.select.value
        if event.select.id == "sort_select":
            if value != self.controller.state.sort_option.value:
                self.controller.change_sort(str(value))
        elif event.select.id == "category_select":
            category = str(value) if value else None
            if category != self.controller.state.selected_category:
                self.run_worker(
                    self.controller.select_category(category), group="list"
                )

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Run a search or open a deep link."""
        if event.input.id == "search_input":
            self.run_worker(
                self.controller.search(event.value), group="list"
            )
        elif event.input.id == "link_input":
            url = event.value.strip()
            if url and not handle_deep_link(url, self):
                self.notify(f"Unrecognised link: {url}", severity="error")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "retry_btn":
            self.run_worker(self.controller.retry(), group="list")

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Open the detail screen for the selected product."""
        if 0 <= event.cursor_row < len(self._rendered):
            self.open_product_detail(self._rendered[event.cursor_row].id)

    def on_data_table_row_highlighted(
        self, event: DataTable.RowHighlighted
    ) -> None:
        """Load the next page when the cursor reaches the last row."""
        table = self._table()
        if table.row_count and event.cursor_row >= table.row_count - 1:
            self.action_load_more()

    # ── Navigator ────────────────────────────────────────

    def open_product_list(self, category: str | None = None) -> None:
        """Return to the list, filtered to *category*."""
        for _ in range(len(self.screen_stack) - 1):
            self.pop_screen()
        self.run_worker(
            self.controller.select_category(category), group="list"
        )

    def open_product_detail(self, product_id: int) -> None:
        """Push the detail screen for *product_id*."""
        self.push_screen(
            ProductDetailScreen(product_id, self.client, self.reminders)
        )

    # ── Actions ──────────────────────────────────────────

    def check_action(
        self, action: str, parameters: tuple[object, ...]
    ) -> bool | None:
        if action in _LIST_ACTIONS and len(self.screen_stack) > 1:
            return False
        return True

    def action_refresh(self) -> None:
        self.run_worker(self.controller.refresh(), group="list")

    def action_load_more(self) -> None:
        state = self.controller.state
        if state.is_busy or not state.has_more:
            return
        self.run_worker(self.controller.load_more(), group="list")

    def action_cycle_sort(self) -> None:
        """Advance to the next sort option."""
        options = list(SortOption)
        current = options.index(self.controller.state.sort_option)
        next_option = options[(current + 1) % len(options)]
        self.controller.change_sort(next_option)
        select = cast(Select[str], self.query_one("#sort_select", Select))
        with select.prevent(Select.Changed):
            select.value = next_option.value

    def action_copy_link(self) -> None:
        """Copy the highlighted product's (or category's) deep link."""
        row = self._table().cursor_row
        if 0 <= row < len(self._rendered):
            link = create_deep_link(product_id=self._rendered[row].id)
        else:
            link = create_deep_link(
                category=self.controller.state.selected_category
            )
        try:
            import pyperclip  # type: ignore[import-untyped]

            pyperclip.copy(link)
            self.notify("Link copied")
        except Exception:
            logger.error(
                "Failed to copy deep link to clipboard",
                exc_info=True,
            )
            self.notify(link, title="Copy failed", severity="warning")

    def _deliver_reminder(self, title: str, body: str) -> None:
        self.notify(body, title=title, timeout=30)
