# src/ui/detail_screen.py

"""Product detail screen."""

import logging

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, LoadingIndicator, Static

from src.api.catalog_client import CatalogClient
from src.models.product import Product
from src.navigation.deep_links import create_deep_link
from src.reminders.reminder_service import PurchaseReminderService
from src.services.list_state import LoadStatus
from src.services.product_detail_controller import (
    DetailState,
    ProductDetailController,
)
from src.ui.formatting import format_discount, format_price, format_rating

logger = logging.getLogger("catalog_browser.ui")


def render_product(product: Product) -> Text:
    """Build the rich text body for a product."""
    body = Text()
    body.append(f"{product.title}\n", style="bold")
    if product.brand:
        body.append(f"{product.brand}\n", style="dim")
    body.append("\n")
    body.append(format_price(product.price), style="bold green")
    discount = format_discount(product.discount_percentage)
    if discount:
        body.append(f"  {discount}", style="red")
    body.append(f"\n⭐ {format_rating(product.rating)}")
    if product.stock is not None:
        stock_style = "green" if product.stock > 0 else "red"
        body.append(f"   Stock: {product.stock}", style=stock_style)
    if product.category:
        body.append(f"\nCategory: {product.category}", style="magenta")
    if product.description:
        body.append(f"\n\n{product.description}\n")
    if product.images:
        body.append(f"\nImages ({len(product.images)}):\n", style="bold")
        for url in product.images:
            body.append(f"  {url}\n", style="dim")
    body.append(f"\n{create_deep_link(product_id=product.id)}", style="dim italic")
    return body


class ProductDetailScreen(Screen[None]):
    """Shows one product with retry and purchase-reminder actions."""

    BINDINGS = [
        Binding("escape", "app.pop_screen", "Back"),
        Binding("a", "add_reminder", "Remind me"),
        Binding("c", "copy_link", "Copy link"),
    ]

    def __init__(
        self,
        product_id: int,
        client: CatalogClient,
        reminders: PurchaseReminderService | None = None,
    ) -> None:
        super().__init__()
        self.product_id = product_id
        self.controller = ProductDetailController(client, reminders)

    def compose(self) -> ComposeResult:
        yield Header()
        yield LoadingIndicator(id="detail_spinner")
        yield VerticalScroll(Static(id="detail_body"), id="detail_container")
        yield Vertical(
            Static(id="detail_error"),
            Button("Retry", variant="primary", id="detail_retry_btn"),
            id="detail_error_view",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.title = f"Product #{self.product_id}"
        self._unsubscribe = self.controller.subscribe(self.render_state)
        self.render_state(self.controller.state)
        self.run_worker(self.controller.load(self.product_id), group="detail")

    def on_unmount(self) -> None:
        self._unsubscribe()

    def render_state(self, state: DetailState) -> None:
        """Show spinner, product body or error view for *state*."""
        loading = state.status in (LoadStatus.IDLE, LoadStatus.LOADING)
        failed = state.status is LoadStatus.ERROR
        self.query_one("#detail_spinner", LoadingIndicator).display = loading
        self.query_one("#detail_container").display = (
            state.product is not None and not loading
        )
        self.query_one("#detail_error_view").display = failed

        if failed:
            status = f" (HTTP {state.error_status})" if state.error_status else ""
            self.query_one("#detail_error", Static).update(
                f"❌ {state.error}{status}"
            )
        if state.product is not None:
            self.query_one("#detail_body", Static).update(
                render_product(state.product)
            )

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "detail_retry_btn":
            self.run_worker(self.controller.retry(), group="detail")

    async def action_add_reminder(self) -> None:
        """Schedule a purchase reminder and report the outcome."""
        if self.controller.state.product is None:
            self.notify("Product is not loaded yet", severity="warning")
            return
        outcome = await self.controller.request_reminder()
        if not outcome.success:
            severity = "error"
        elif outcome.partial:
            severity = "warning"
        else:
            severity = "information"
        self.notify(outcome.message, severity=severity)

    def action_copy_link(self) -> None:
        """Copy this product's deep link to the clipboard."""
        link = create_deep_link(product_id=self.product_id)
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
