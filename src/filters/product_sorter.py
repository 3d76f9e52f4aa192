# src/filters/product_sorter.py

"""Client-side ordering of the accumulated product list."""

import logging
from collections.abc import Callable, Sequence

from src.models.product import Product
from src.models.sort_option import SortOption

logger = logging.getLogger("catalog_browser.filters")


class ProductSorter:
    """Stable sort of products by price or rating."""

    @staticmethod
    def _sort_key(
        option: SortOption,
    ) -> Callable[[Product], tuple[bool, float]]:
        """Build a key that places products missing the field last.

        Descending order negates the value instead of using
        ``reverse=True`` so that missing values stay at the end.
        """
        field = option.field
        sign = -1.0 if option.descending else 1.0

        def key(product: Product) -> tuple[bool, float]:
            value = getattr(product, field)
            if value is None:
                return (True, 0.0)
            return (False, sign * float(value))

        return key

    @staticmethod
    def sort(
        products: Sequence[Product],
        option: "SortOption | str | None",
    ) -> list[Product]:
        """Return a new list of *products* ordered by *option*.

        Equal keys keep their input (fetch) order.  Unknown options
        return a copy of the input unchanged.
        """
        resolved = SortOption.parse(option)
        if resolved is None:
            logger.debug("Unknown sort option %r, keeping fetch order", option)
            return list(products)
        return sorted(products, key=ProductSorter._sort_key(resolved))
