# src/navigation/deep_links.py

"""Deep-link parsing, construction and dispatch.

Supported shapes::

    productsapp://product/{integerId}
    productsapp://category/{urlEncodedCategoryName}

Anything else resolves to ``None``.  Parsing never raises; callers decide
whether an unrecognised link deserves an error message.
"""

import logging
from typing import Protocol
from urllib.parse import quote, unquote, urlsplit

from src.config.settings import Settings
from src.models.intent import (
    DeepLinkIntent,
    ProductDetailIntent,
    ProductListIntent,
)

logger = logging.getLogger("catalog_browser.deep_links")


class Navigator(Protocol):
    """Navigation capability consumed by deep-link dispatch."""

    def open_product_list(self, category: str | None = None) -> None:
        ...

    def open_product_detail(self, product_id: int) -> None:
        ...


def _path_segments(url: str, scheme: str) -> list[str] | None:
    """Split the path of *url* into non-empty segments.

    For custom app schemes the authority part is the first path
    segment (``productsapp://product/42`` → ``["product", "42"]``).
    """
    parts = urlsplit(url.strip())
    if parts.scheme.lower() != scheme.lower():
        return None
    path = f"{parts.netloc}/{parts.path}"
    return [segment for segment in path.split("/") if segment]


def parse_deep_link(
    url: str, scheme: str | None = None,
) -> DeepLinkIntent | None:
    """Resolve *url* into a navigation intent, or ``None``."""
    scheme = scheme or Settings.DEEP_LINK_SCHEME
    try:
        segments = _path_segments(url, scheme)
    except (ValueError, AttributeError):
        logger.warning("Unparseable deep link: %r", url)
        return None

    if not segments or len(segments) != 2:
        return None

    kind, value = segments
    if kind == "product":
        if not (value.isascii() and value.isdigit()):
            return None
        product_id = int(value, 10)
        if product_id <= 0:
            return None
        return ProductDetailIntent(product_id=product_id)

    if kind == "category":
        return ProductListIntent(category=unquote(value))

    return None


def create_deep_link(
    product_id: int | None = None,
    category: str | None = None,
    scheme: str | None = None,
) -> str:
    """Build a deep link for a product or a category."""
    base = f"{scheme or Settings.DEEP_LINK_SCHEME}://"
    if product_id:
        return f"{base}product/{product_id}"
    if category:
        return f"{base}category/{quote(category, safe='')}"
    return base


def dispatch_deep_link(
    intent: DeepLinkIntent | None, navigator: Navigator,
) -> bool:
    """Route *intent* to the navigator.

    Returns ``True`` when a navigation call was made.
    """
    if isinstance(intent, ProductDetailIntent):
        navigator.open_product_detail(intent.product_id)
        return True
    if isinstance(intent, ProductListIntent):
        navigator.open_product_list(intent.category)
        return True
    return False


def handle_deep_link(url: str, navigator: Navigator) -> bool:
    """Parse *url* and dispatch it in one step."""
    intent = parse_deep_link(url)
    handled = dispatch_deep_link(intent, navigator)
    if handled:
        logger.info("Deep link %s dispatched as %s", url, intent)
    else:
        logger.info("Deep link %s not recognised", url)
    return handled
