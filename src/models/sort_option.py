# src/models/sort_option.py

"""Sort criteria offered by the product list."""

from enum import Enum


class SortOption(str, Enum):
    """Client-side ordering applied to the accumulated product list."""

    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    RATING_ASC = "rating-asc"
    RATING_DESC = "rating-desc"

    @property
    def label(self) -> str:
        """Human readable label for filter bars and tables."""
        return _LABELS[self]

    @property
    def field(self) -> str:
        """Name of the Product attribute this option orders by."""
        return self.value.split("-", 1)[0]

    @property
    def descending(self) -> bool:
        return self.value.endswith("-desc")

    @classmethod
    def parse(cls, value: "str | SortOption | None") -> "SortOption | None":
        """Return the matching option, or ``None`` for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


_LABELS: dict[SortOption, str] = {
    SortOption.PRICE_ASC: "Price: Low to High",
    SortOption.PRICE_DESC: "Price: High to Low",
    SortOption.RATING_ASC: "Rating: Low to High",
    SortOption.RATING_DESC: "Rating: High to Low",
}
