# src/services/product_detail_controller.py

"""Loads a single product and schedules purchase reminders for it."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime

from src.api.catalog_client import CatalogClient
from src.api.errors import CatalogApiError
from src.models.product import Product
from src.models.reminder import ReminderOutcome
from src.reminders.errors import ReminderError, ReminderPermissionError
from src.reminders.reminder_service import PurchaseReminderService
from src.services.list_state import LoadStatus

logger = logging.getLogger("catalog_browser.detail")

_GENERIC_LOAD_ERROR = "Failed to load product details. Please try again."
_PERMISSION_MESSAGE = (
    "Failed to add reminder. Please check your calendar permissions."
)


@dataclass(frozen=True)
class DetailState:
    product_id: int | None = None
    product: Product | None = None
    status: LoadStatus = LoadStatus.IDLE
    error: str | None = None
    error_status: int | None = None

    @property
    def is_loading(self) -> bool:
        return self.status is LoadStatus.LOADING


class ProductDetailController:
    """State holder for the product detail screen."""

    def __init__(
        self,
        client: CatalogClient,
        reminders: PurchaseReminderService | None = None,
    ) -> None:
        self.client = client
        self.reminders = reminders
        self.state = DetailState()
        self._listeners: list[Callable[[DetailState], None]] = []

    def subscribe(
        self, listener: Callable[[DetailState], None],
    ) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: DetailState) -> None:
        self.state = state
        for listener in list(self._listeners):
            listener(state)

    async def load(self, product_id: int) -> None:
        """Fetch *product_id*; outcome lands in :attr:`state`."""
        self._set_state(
            replace(
                self.state,
                product_id=product_id,
                status=LoadStatus.LOADING,
                error=None,
                error_status=None,
            )
        )
        try:
            product = await self.client.get_product(product_id)
        except CatalogApiError as exc:
            logger.error("Error loading product %d: %s", product_id, exc.message)
            self._set_state(
                replace(
                    self.state,
                    product=None,
                    status=LoadStatus.ERROR,
                    error=exc.message,
                    error_status=exc.status_code,
                )
            )
            return
        except Exception:
            logger.error("Unexpected error loading product %d", product_id, exc_info=True)
            self._set_state(
                replace(
                    self.state,
                    product=None,
                    status=LoadStatus.ERROR,
                    error=_GENERIC_LOAD_ERROR,
                )
            )
            return

        self._set_state(
            replace(self.state, product=product, status=LoadStatus.LOADED)
        )

    async def retry(self) -> None:
        """Re-issue the last load with the same product id."""
        if self.state.product_id is None:
            return
        await self.load(self.state.product_id)

    async def request_reminder(
        self,
        product: Product | None = None,
        when: datetime | None = None,
    ) -> ReminderOutcome:
        """Schedule a purchase reminder for *product* (default: the loaded one).

        Never raises and never changes :attr:`state`.
        """
        product = product or self.state.product
        if product is None:
            return ReminderOutcome(
                success=False, message="No product loaded."
            )
        if self.reminders is None:
            return ReminderOutcome(
                success=False, message="Reminders are not available."
            )

        try:
            receipt = await self.reminders.add_purchase_reminder(
                product.title, when
            )
        except ReminderPermissionError:
            logger.warning("Reminder permission denied for product %d", product.id)
            return ReminderOutcome(success=False, message=_PERMISSION_MESSAGE)
        except ReminderError as exc:
            logger.error("Failed to add reminder: %s", exc)
            return ReminderOutcome(
                success=False, message=f"Failed to add reminder: {exc}"
            )
        except Exception:
            logger.error("Failed to add reminder", exc_info=True)
            return ReminderOutcome(success=False, message=_PERMISSION_MESSAGE)

        if not receipt.notification_scheduled:
            return ReminderOutcome(
                success=True,
                partial=True,
                message=(
                    "Reminder added to your calendar, but the "
                    "notification could not be scheduled."
                ),
                event_id=receipt.event_id,
            )
        return ReminderOutcome(
            success=True,
            message="Reminder added to your calendar and notifications!",
            event_id=receipt.event_id,
        )
