# src/models/product.py

"""Product data models for inter-module data flow."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Product:
    """A single catalog product as returned by the product API.

    Only ``id`` and ``title`` are required.  Every other field is
    ``None`` when the upstream payload did not carry it.
    """

    id: int
    title: str
    description: str | None = None
    price: float | None = None
    discount_percentage: float | None = None
    rating: float | None = None
    stock: int | None = None
    brand: str | None = None
    category: str | None = None
    thumbnail: str | None = None
    images: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ProductPage:
    """One fetched batch of products plus its paging metadata."""

    skip: int
    limit: int
    total: int | None
    products: tuple[Product, ...] = ()
