from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    User record owned by the identity service.

    Identity:
      - id: stable integer, assigned at creation, carried as JWT "sub"

    `username` is only the login handle; it is never returned to other
    services, which see the public profile (id, public_name, icon_url).
    Immutable once created.
    """

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)

    username: str = Field(
        max_length=50,
        unique=True,
        index=True,
        description="Login handle (lowercase)",
    )

    public_name: str = Field(
        max_length=100,
        description="Display name shown to other users",
    )

    icon_url: str | None = Field(
        default=None,
        description="Avatar URL",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
