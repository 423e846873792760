from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Wishlist(SQLModel, table=True):
    """
    A named list owned by exactly one user.

    - owner_id is set at creation and never transferred.
    - privacy ("Private" | "Shared" | "Public") is informational only;
      access is decided by ownership and grants.
    """

    __tablename__ = "wishlists"

    id: int | None = Field(default=None, primary_key=True)

    name: str = Field(
        max_length=100,
        description="Display name of the list",
    )

    owner_id: int = Field(
        index=True,
        description="User id of the owner (identity service)",
    )

    privacy: str = Field(
        default="Private",
        max_length=10,
        description="Private | Shared | Public",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class WishlistItem(SQLModel, table=True):
    """
    Line item of a wishlist.

    product_id points into the catalog and may dangle; `title` is a
    snapshot taken when the item was added and serves as display fallback.
    Items are always listed by (priority, id) ascending.
    """

    __tablename__ = "wishlist_items"

    id: int | None = Field(default=None, primary_key=True)

    wishlist_id: int = Field(
        foreign_key="wishlists.id",
        index=True,
    )

    product_id: int = Field(
        index=True,
        description="Catalog product id (not enforced)",
    )

    title: str | None = Field(
        default=None,
        max_length=255,
        description="Product title at the time the item was added",
    )

    priority: int = Field(
        default=0,
        description="Ascending sort key",
    )

    added_by: int = Field(
        description="User id of whoever added the item",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
