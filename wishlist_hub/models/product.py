from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Catalog entry. Read-only to every other component.
    """

    __tablename__ = "products"

    id: int | None = Field(default=None, primary_key=True)

    title: str = Field(
        max_length=255,
        index=True,
        description="Display name of the product",
    )

    description: str = Field(
        default="",
        description="Long description, searched by free-text queries",
    )

    category: str = Field(
        max_length=50,
        index=True,
        description="Category name (matched case-insensitively)",
    )

    price: float = Field(
        ge=0,
        description="Unit price",
    )

    rating: float = Field(
        default=0,
        ge=0,
        le=5,
        description="Average review rating, 0-5",
    )

    retailer: str = Field(
        default="",
        max_length=100,
        description="Store selling the product",
    )
