from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class AccessGrant(SQLModel, table=True):
    """
    Collaborator grant: (wishlist, user) -> role.

    The composite primary key guarantees at most one row per pair; writers
    go through a single INSERT ... ON CONFLICT statement.
    The owner never has a row here; ownership lives on Wishlist.owner_id.
    """

    __tablename__ = "wishlist_access"

    wishlist_id: int = Field(primary_key=True)
    user_id: int = Field(primary_key=True, index=True)

    role: str = Field(
        max_length=20,
        description="view_only | view_edit",
    )

    display_name: str | None = Field(
        default=None,
        max_length=100,
        description="Optional per-list nickname chosen on acceptance",
    )

    invited_by: int | None = Field(default=None)

    invited_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Invitation(SQLModel, table=True):
    """
    Shareable invitation link for a wishlist.

    Only visible while expires_at > now. Rows are not deleted on expiry or
    on acceptance, so one link can be accepted by several users.
    """

    __tablename__ = "wishlist_invites"

    token: str = Field(primary_key=True, max_length=64)

    wishlist_id: int = Field(index=True)

    role: str = Field(
        default="view_only",
        max_length=20,
        description="Role granted on acceptance",
    )

    created_by: int | None = Field(default=None)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    expires_at: datetime = Field(
        index=True,
        description="Absolute deadline (UTC)",
    )
