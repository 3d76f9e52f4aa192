# tests/test_app.py

"""Smoke tests for the TUI application using Textual's Pilot."""

import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Any, cast
from unittest.mock import MagicMock, patch

from textual.widgets import Button, DataTable, Input, Select

from src.api.errors import NotFoundError, TransportError
from src.models.product import Product, ProductPage
from src.models.sort_option import SortOption
from src.reminders.calendar_store import IcsCalendarStore
from src.reminders.reminder_service import PurchaseReminderService
from src.ui.app import CatalogApp
from src.ui.detail_screen import ProductDetailScreen

PRODUCTS = [
    Product(id=1, title="Mid", price=20.0, rating=4.0, category="beauty"),
    Product(id=2, title="Cheap", price=5.0, rating=3.0, category="beauty"),
    Product(id=3, title="Pricey", price=90.0, rating=4.9, category="laptops"),
]


class FakeCatalogClient:
    """In-memory CatalogClient double for the TUI."""

    def __init__(self) -> None:
        self.fail: Exception | None = None
        self.calls: list[tuple[Any, ...]] = []
        self.closed = False

    async def list_products(
        self, offset: int, limit: int, category: str | None = None,
    ) -> ProductPage:
        self.calls.append(("list", offset, category))
        if self.fail is not None:
            raise self.fail
        items = [p for p in PRODUCTS if category in (None, p.category)]
        return ProductPage(offset, limit, len(items), tuple(items[offset:offset + limit]))

    async def search_products(
        self, query: str, offset: int, limit: int,
    ) -> ProductPage:
        self.calls.append(("search", query))
        items = [p for p in PRODUCTS if query.lower() in p.title.lower()]
        return ProductPage(offset, limit, len(items), tuple(items))

    async def get_product(self, product_id: int) -> Product:
        self.calls.append(("get", product_id))
        for product in PRODUCTS:
            if product.id == product_id:
                return product
        raise NotFoundError("HTTP error! status: 404", 404)

    async def list_categories(self) -> list[str]:
        return ["beauty", "laptops"]

    async def close(self) -> None:
        self.closed = True


class TestCatalogApp(unittest.IsolatedAsyncioTestCase):
    """Smoke tests for the Textual TUI."""

    def setUp(self) -> None:
        self._tmp = TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.client = FakeCatalogClient()
        self.reminders = PurchaseReminderService(
            IcsCalendarStore(Path(self._tmp.name))
        )

    def _app(self, start_link: str | None = None) -> CatalogApp:
        return CatalogApp(
            client=self.client,  # type: ignore[arg-type]
            reminders=self.reminders,
            start_link=start_link,
        )

    @staticmethod
    def _table(app: CatalogApp) -> DataTable[Any]:
        return cast(DataTable[Any], app.query_one("#product_table", DataTable))

    async def _settle(self, app: CatalogApp, pilot: Any) -> None:
        await pilot.pause()
        await app.workers.wait_for_complete()
        await pilot.pause()

    async def test_app_composes_and_loads(self) -> None:
        """The first page fills the table, sorted by price."""
        app = self._app()
        async with app.run_test() as pilot:
            await self._settle(app, pilot)
            app.query_one("#category_select", Select)
            app.query_one("#sort_select", Select)
            app.query_one("#search_input", Input)
            self.assertEqual(self._table(app).row_count, 3)
            self.assertEqual(
                [p.id for p in app.controller.visible_products], [2, 1, 3]
            )
            self.assertEqual(app.controller.state.categories, ("beauty", "laptops"))
            self.assertFalse(app.query_one("#error_view").display)

    async def test_failure_shows_error_view_and_retry(self) -> None:
        self.client.fail = TransportError("Network request failed")
        app = self._app()
        async with app.run_test() as pilot:
            await self._settle(app, pilot)
            self.assertTrue(app.query_one("#error_view").display)
            self.assertFalse(self._table(app).display)
            self.assertEqual(app.controller.state.error, "Network request failed")

            self.client.fail = None
            app.query_one("#retry_btn", Button).press()
            await self._settle(app, pilot)
            self.assertFalse(app.query_one("#error_view").display)
            self.assertEqual(self._table(app).row_count, 3)

    async def test_search_submission(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await self._settle(app, pilot)
            search = app.query_one("#search_input", Input)
            search.focus()
            search.value = "cheap"
            await pilot.press("enter")
            await self._settle(app, pilot)
            self.assertIn(("search", "cheap"), self.client.calls)
            self.assertEqual(self._table(app).row_count, 1)

    async def test_cycle_sort_is_local(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await self._settle(app, pilot)
            calls = len(self.client.calls)
            app.action_cycle_sort()
            await pilot.pause()
            self.assertIs(app.controller.state.sort_option, SortOption.PRICE_DESC)
            self.assertEqual(
                app.query_one("#sort_select", Select).value, "price-desc"
            )
            self.assertEqual(
                [p.id for p in app.controller.visible_products], [3, 1, 2]
            )
            self.assertEqual(len(self.client.calls), calls)

    async def test_category_start_link(self) -> None:
        app = self._app("productsapp://category/laptops")
        async with app.run_test() as pilot:
            await self._settle(app, pilot)
            self.assertEqual(app.controller.state.selected_category, "laptops")
            self.assertIn(("list", 0, "laptops"), self.client.calls)
            self.assertEqual(
                app.query_one("#category_select", Select).value, "laptops"
            )
            self.assertEqual(self._table(app).row_count, 1)

    async def test_product_start_link_opens_detail(self) -> None:
        app = self._app("productsapp://product/3")
        async with app.run_test() as pilot:
            await self._settle(app, pilot)
            self.assertIsInstance(app.screen, ProductDetailScreen)
            screen = cast(ProductDetailScreen, app.screen)
            await screen.workers.wait_for_complete()
            await pilot.pause()
            self.assertEqual(screen.controller.state.product, PRODUCTS[2])
            self.assertFalse(app.check_action("refresh", ()))

            await pilot.press("escape")
            await pilot.pause()
            self.assertNotIsInstance(app.screen, ProductDetailScreen)
            self.assertTrue(app.check_action("refresh", ()))

    async def test_unknown_product_shows_detail_error(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await self._settle(app, pilot)
            app.open_product_detail(404)
            await pilot.pause()
            screen = cast(ProductDetailScreen, app.screen)
            await screen.workers.wait_for_complete()
            await pilot.pause()
            self.assertEqual(screen.controller.state.error_status, 404)
            self.assertTrue(screen.query_one("#detail_error_view").display)

            screen.query_one("#detail_retry_btn", Button).press()
            await pilot.pause()
            await screen.workers.wait_for_complete()
            await pilot.pause()
            self.assertEqual(
                [c for c in self.client.calls if c[0] == "get"],
                [("get", 404), ("get", 404)],
            )
            self.assertEqual(screen.controller.state.error_status, 404)

    async def test_link_input_dispatches(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await self._settle(app, pilot)
            link = app.query_one("#link_input", Input)
            link.focus()
            link.value = "productsapp://product/1"
            await pilot.press("enter")
            await pilot.pause()
            self.assertIsInstance(app.screen, ProductDetailScreen)

    async def test_open_product_list_returns_to_root(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await self._settle(app, pilot)
            app.open_product_detail(1)
            await pilot.pause()
            app.open_product_list("beauty")
            await self._settle(app, pilot)
            self.assertNotIsInstance(app.screen, ProductDetailScreen)
            self.assertEqual(app.controller.state.selected_category, "beauty")
            self.assertEqual(self._table(app).row_count, 2)

    async def test_add_reminder_from_detail(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await self._settle(app, pilot)
            app.open_product_detail(1)
            await pilot.pause()
            screen = cast(ProductDetailScreen, app.screen)
            await screen.workers.wait_for_complete()
            await screen.action_add_reminder()
            events = await self.reminders.upcoming_reminders()
            self.assertEqual([e.title for e in events], ["Purchase Reminder: Mid"])

    async def test_copy_link_uses_highlighted_product(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await self._settle(app, pilot)
            mock_clip = MagicMock()
            with patch.dict("sys.modules", {"pyperclip": mock_clip}):
                app.action_copy_link()
            mock_clip.copy.assert_called_once_with("productsapp://product/2")

    async def test_unmount_keeps_injected_client_open(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await self._settle(app, pilot)
        self.assertFalse(self.client.closed)


if __name__ == "__main__":
    unittest.main()
