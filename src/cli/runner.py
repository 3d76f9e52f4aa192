# src/cli/runner.py

"""Headless CLI runner built on the async controllers."""

import json
import logging
import sys
from dataclasses import asdict

from rich.console import Console
from rich.table import Table

from src.api.catalog_client import CatalogClient
from src.models.product import Product
from src.models.sort_option import SortOption
from src.navigation.deep_links import parse_deep_link
from src.reminders.calendar_store import IcsCalendarStore
from src.reminders.reminder_service import PurchaseReminderService
from src.services.product_detail_controller import ProductDetailController
from src.services.product_list_controller import ProductListController
from src.ui.formatting import (
    format_discount,
    format_price,
    format_rating,
    product_to_dict,
)

logger = logging.getLogger("catalog_browser.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _write_json(data: object) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2, default=str)
    sys.stdout.write("\n")


def _print_table(products: list[Product], title: str) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title=title,
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Title", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Rating", justify="center")
    table.add_column("Category", style="magenta")

    for idx, p in enumerate(products, 1):
        price = format_price(p.price)
        discount = format_discount(p.discount_percentage)
        table.add_row(
            str(idx),
            str(p.id),
            p.title[:50],
            f"{price} {discount}".strip(),
            format_rating(p.rating),
            p.category or "—",
        )

    Console().print(table)


def _print_product(product: Product) -> None:
    """Render a single product as a two-column Rich table."""
    table = Table(title=product.title, show_header=False, title_style="bold cyan")
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    for key, value in product_to_dict(product).items():
        if value is None:
            continue
        if isinstance(value, list):
            value = "\n".join(str(v) for v in value)
        table.add_row(key, str(value))
    Console().print(table)


async def cli_list(
    category: str | None,
    query: str | None,
    sort: str | None,
    pages: int,
    output_format: str,
) -> int:
    """List products page by page and return an exit code (0=ok, 1=fail)."""
    if sort is not None and SortOption.parse(sort) is None:
        valid = ", ".join(o.value for o in SortOption)
        _err.print(f"[red]Unknown sort option: {sort}[/red]")
        _err.print(f"[dim]Available: {valid}[/dim]")
        return 1

    async with CatalogClient() as client:
        controller = ProductListController(client)
        if sort is not None:
            controller.change_sort(sort)

        if query:
            _err.print(f"[bold]Searching:[/bold] {query}")
            await controller.search(query)
        else:
            label = category or "all categories"
            _err.print(f"[bold]Listing:[/bold] {label}")
            await controller.select_category(category)

        for _ in range(max(pages, 1) - 1):
            if not await controller.load_more():
                break

        state = controller.state
        if state.error:
            _err.print(f"[red]Error: {state.error}[/red]")
            if not state.products:
                return 1

        products = controller.visible_products
        if not products:
            _err.print("[yellow]No products found.[/yellow]")
            return 1

        more = " (more available)" if state.has_more else ""
        _err.print(
            f"[green]✓ {len(products)} products, "
            f"{state.page + 1} page(s){more}[/green]"
        )

        if output_format == "table":
            _print_table(products, f"Products: {state.sort_option.label}")
        else:
            _write_json([product_to_dict(p) for p in products])
    return 0


async def cli_show(product_id: int, output_format: str) -> int:
    """Show a single product."""
    async with CatalogClient() as client:
        controller = ProductDetailController(client)
        await controller.load(product_id)
        state = controller.state

    if state.product is None:
        status = f" (HTTP {state.error_status})" if state.error_status else ""
        _err.print(f"[red]Error: {state.error}{status}[/red]")
        return 1

    if output_format == "table":
        _print_product(state.product)
    else:
        _write_json(product_to_dict(state.product))
    return 0


async def cli_categories(output_format: str) -> int:
    """Print the category vocabulary (fallback list when unavailable)."""
    async with CatalogClient() as client:
        controller = ProductListController(client)
        await controller.load_categories()
        categories = list(controller.state.categories)

    if output_format == "table":
        table = Table(title="Categories", title_style="bold cyan")
        table.add_column("Category")
        for category in categories:
            table.add_row(category)
        Console().print(table)
    else:
        _write_json(categories)
    return 0


def cli_resolve_link(url: str) -> int:
    """Print the navigation intent a deep link resolves to."""
    intent = parse_deep_link(url)
    if intent is None:
        _err.print(f"[yellow]Unrecognised deep link: {url}[/yellow]")
        return 1
    _write_json({"target": type(intent).__name__, **asdict(intent)})
    return 0


async def run_list_reminders(output_format: str) -> int:
    """List upcoming purchase reminders from the calendar store."""
    service = PurchaseReminderService(IcsCalendarStore())
    events = await service.upcoming_reminders()

    if output_format == "json":
        _write_json([asdict(e) for e in events])
        return 0

    if not events:
        _err.print("[yellow]No upcoming reminders.[/yellow]")
        return 0

    table = Table(
        title="Upcoming Reminders",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("When", style="green")
    table.add_column("Title")
    table.add_column("Event", style="dim")
    for event in events:
        table.add_row(
            event.start.astimezone().strftime("%Y-%m-%d %H:%M"),
            event.title,
            event.event_id,
        )
    Console().print(table)
    return 0


async def run_remove_reminder(event_id: str) -> int:
    """Delete a purchase reminder from the calendar store."""
    from src.reminders.errors import ReminderError

    service = PurchaseReminderService(IcsCalendarStore())
    try:
        await service.remove_reminder(event_id)
    except ReminderError as exc:
        logger.error("Failed to remove reminder %s: %s", event_id, exc)
        _err.print(f"[red]Failed to remove reminder: {exc}[/red]")
        return 1
    _err.print(f"[green]✓ Removed reminder {event_id}[/green]")
    return 0


async def run_health_check() -> int:
    """Run connectivity health check on the catalog endpoints."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running catalog API health check...[/bold]")
    async with CatalogClient() as client:
        checker = HealthChecker(client)
        results = await checker.check_all()

    table = Table(
        title="Catalog API Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Endpoint", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "—"
        )
        table.add_row(
            r.endpoint, status, latency, r.message,
        )

    Console().print(table)
    return 1 if any_down else 0
