# src/ui/formatting.py

"""Display helpers shared by the TUI and the CLI."""

from src.models.product import Product


def format_price(price: float | None) -> str:
    return f"${price:,.2f}" if price is not None else "N/A"


def format_rating(rating: float | None) -> str:
    return f"{rating:.1f}" if rating is not None else "—"


def format_discount(discount: float | None) -> str:
    return f"-{discount:.0f}%" if discount else ""


def product_to_dict(product: Product) -> dict[str, object]:
    """Serialise a product to a plain dict for JSON output."""
    return {
        "id": product.id,
        "title": product.title,
        "description": product.description,
        "price": product.price,
        "discountPercentage": product.discount_percentage,
        "rating": product.rating,
        "stock": product.stock,
        "brand": product.brand,
        "category": product.category,
        "thumbnail": product.thumbnail,
        "images": list(product.images) if product.images is not None else None,
    }
