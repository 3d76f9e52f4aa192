# src/models/intent.py

"""Navigation intents resolved from deep-link URLs."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ProductDetailIntent:
    """Open the detail view of a single product."""

    product_id: int


@dataclass(frozen=True)
class ProductListIntent:
    """Open the product list filtered to one category."""

    category: str


DeepLinkIntent = Union[ProductDetailIntent, ProductListIntent]
