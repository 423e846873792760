from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from wishlist_hub.schemas.product import ProductSummary
from wishlist_hub.schemas.user import UserSummary

Privacy = Literal["Private", "Shared", "Public"]


class WishlistCreate(SQLModel):
    """
    Payload for creating a wishlist. The owner is always the caller.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    privacy: Privacy = "Private"

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class WishlistRead(SQLModel):
    id: int
    name: str
    owner_id: int
    privacy: Privacy
    created_at: datetime | None = None


class WishlistItemCreate(SQLModel):
    """
    Payload for adding an item.

    `title` is optional; when omitted the gateway snapshots the catalog
    title of `product_id`.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: int
    title: str | None = Field(default=None, max_length=255)
    priority: int = 0

    @field_validator("title")
    @classmethod
    def normalize_title(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class WishlistItemRead(SQLModel):
    id: int
    wishlist_id: int
    product_id: int
    title: str | None = None
    priority: int
    added_by: int
    created_at: datetime | None = None


# ----- Gateway (enriched) shapes -----


class EnrichedItem(WishlistItemRead):
    """Item with its catalog product attached (or a placeholder)."""

    product: ProductSummary


class WishlistWithOwner(WishlistRead):
    owner: UserSummary


class SharedWishlist(WishlistWithOwner):
    """A list shared with the caller, with the caller's role on it."""

    role: str


class WishlistDetail(WishlistWithOwner):
    role: str
    items: list[EnrichedItem]
