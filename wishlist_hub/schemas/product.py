from typing import Any

from sqlmodel import SQLModel


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: int
    title: str
    description: str = ""
    category: str
    price: float
    rating: float = 0
    retailer: str = ""


class ProductSummary(SQLModel):
    """
    Product as attached to a wishlist item.

    Only `id` and `title` are guaranteed: a dangling product_id is
    represented by the placeholder {"id": ..., "title": "Product not found"}.
    """

    id: int
    title: str
    description: str | None = None
    category: str | None = None
    price: float | None = None
    rating: float | None = None
    retailer: str | None = None


class ProductPage(SQLModel):
    """
    Paginated listing / search result.
    """

    products: list[ProductRead]
    total: int
    limit: int
    offset: int
    query: dict[str, Any] | None = None
