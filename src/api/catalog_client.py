# src/api/catalog_client.py

"""Async client for the remote product catalog REST API."""

import json
import logging
from typing import Any
from urllib.parse import quote

from curl_cffi import requests as curl_requests

from src.api.errors import (
    NotFoundError,
    RemoteStatusError,
    ResponseFormatError,
    TransportError,
)
from src.config.settings import Settings
from src.models.product import Product, ProductPage

# Upstream field names accepted for each Product attribute, in priority order
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "title": ("title", "name"),
    "description": ("description",),
    "price": ("price",),
    "discount_percentage": ("discountPercentage", "discount_percentage"),
    "rating": ("rating",),
    "stock": ("stock",),
    "brand": ("brand",),
    "category": ("category",),
    "thumbnail": ("thumbnail", "image", "image_url"),
    "images": ("images",),
}

_FLOAT_FIELDS = ("price", "discount_percentage", "rating")
_STR_FIELDS = ("description", "brand", "category", "thumbnail")


class CatalogClient:
    """Read-only client for the product catalog service.

    Every failure leaves this class as a :class:`CatalogApiError`
    subclass; callers never see transport exceptions.  The client does
    not retry.
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: Any | None = None,
    ) -> None:
        self.logger = logging.getLogger("catalog_browser.api")
        self.settings = Settings()
        self.base_url = (base_url or self.settings.API_BASE_URL).rstrip("/")
        self._session = session

    @property
    def session(self) -> Any:
        """The HTTP session, created on first use inside the event loop."""
        if self._session is None:
            self._session = curl_requests.AsyncSession(
                impersonate=self.settings.IMPERSONATE_BROWSER
            )
        return self._session

    async def close(self) -> None:
        """Release the underlying HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ── Transport ────────────────────────────────────────

    async def get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET *path* relative to the base URL and decode the JSON body."""
        url = f"{self.base_url}{path}"
        self.logger.debug("GET %s params=%s", url, params)
        try:
            resp = await self.session.get(
                url,
                params=params,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self.settings.REQUEST_TIMEOUT,
            )
        except Exception as exc:
            self.logger.warning(
                "Request error for %s: %s", url, exc, exc_info=True
            )
            raise TransportError(
                str(exc) or "Network request failed"
            ) from exc

        status: int = resp.status_code
        if status == 404:
            self.logger.info("HTTP 404 for %s", url)
            raise NotFoundError(
                f"HTTP error! status: {status}", status
            )
        if not 200 <= status < 300:
            self.logger.warning("HTTP %d for %s", status, url)
            raise RemoteStatusError(
                f"HTTP error! status: {status}", status
            )

        try:
            return json.loads(resp.text)
        except ValueError as exc:
            raise ResponseFormatError(
                f"Invalid JSON from {path}", status
            ) from exc

    # ── Response mapping ─────────────────────────────────

    @staticmethod
    def _pick(raw: dict[str, Any], field: str) -> Any:
        """Return the first present alias of *field*, or ``None``."""
        for alias in _FIELD_ALIASES[field]:
            if raw.get(alias) is not None:
                return raw[alias]
        return None

    @staticmethod
    def parse_product(raw: Any) -> Product:
        """Map one upstream product object into a :class:`Product`."""
        if not isinstance(raw, dict) or raw.get("id") is None:
            raise ResponseFormatError("Product payload without an id")

        values: dict[str, Any] = {
            field: CatalogClient._pick(raw, field)
            for field in _FIELD_ALIASES
        }
        if values["title"] is None:
            raise ResponseFormatError(
                f"Product {raw['id']} payload without a title"
            )
        try:
            for field in _FLOAT_FIELDS:
                if values[field] is not None:
                    values[field] = float(values[field])
            for field in _STR_FIELDS:
                if values[field] is not None:
                    values[field] = str(values[field])
            if values["stock"] is not None:
                values["stock"] = int(values["stock"])
            if values["images"] is not None:
                values["images"] = tuple(str(i) for i in values["images"])
            product_id = int(raw["id"])
        except (TypeError, ValueError) as exc:
            raise ResponseFormatError(
                f"Malformed product payload: {exc}"
            ) from exc

        return Product(
            id=product_id,
            title=str(values.pop("title")),
            **values,
        )

    @staticmethod
    def parse_page(
        data: Any, offset: int, limit: int,
    ) -> ProductPage:
        """Map a ``{products, total, skip, limit}`` body into a page."""
        if not isinstance(data, dict) or not isinstance(
            data.get("products"), list
        ):
            raise ResponseFormatError("List payload without products")

        products = tuple(
            CatalogClient.parse_product(item) for item in data["products"]
        )
        try:
            total = (
                int(data["total"])
                if data.get("total") is not None
                else None
            )
            return ProductPage(
                skip=int(data.get("skip", offset)),
                limit=int(data.get("limit", limit)),
                total=total,
                products=products,
            )
        except (TypeError, ValueError) as exc:
            raise ResponseFormatError(
                f"Malformed paging metadata: {exc}"
            ) from exc

    # ── Operations ───────────────────────────────────────

    async def list_products(
        self,
        offset: int,
        limit: int,
        category: str | None = None,
    ) -> ProductPage:
        """Fetch the page at ``[offset, offset+limit)``, optionally by category."""
        path = "/products"
        if category:
            path = f"/products/category/{quote(category, safe='')}"
        data = await self.get_json(
            path, {"skip": offset, "limit": limit}
        )
        page = self.parse_page(data, offset, limit)
        self.logger.info(
            "Fetched %d products (skip=%d, limit=%d, category=%s)",
            len(page.products),
            offset,
            limit,
            category,
        )
        return page

    async def search_products(
        self, query: str, offset: int, limit: int,
    ) -> ProductPage:
        """Fetch products ranked by relevance to a free-text query."""
        data = await self.get_json(
            "/products/search",
            {"q": query, "skip": offset, "limit": limit},
        )
        page = self.parse_page(data, offset, limit)
        self.logger.info(
            "Search '%s' returned %d products (skip=%d)",
            query,
            len(page.products),
            offset,
        )
        return page

    async def get_product(self, product_id: int) -> Product:
        """Fetch a single product; a missing id raises NotFoundError."""
        data = await self.get_json(f"/products/{int(product_id)}")
        return self.parse_product(data)

    async def list_categories(self) -> list[str]:
        """Fetch the category vocabulary.

        Accepts a flat list of strings or objects with a ``slug``
        (or ``name``) key.
        """
        data = await self.get_json("/products/categories")
        if not isinstance(data, list):
            raise ResponseFormatError("Categories payload is not a list")

        categories: list[str] = []
        for item in data:
            if isinstance(item, dict):
                value = item.get("slug") or item.get("name")
            else:
                value = item
            if value and str(value) not in categories:
                categories.append(str(value))
        return categories


