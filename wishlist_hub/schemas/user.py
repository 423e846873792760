from datetime import datetime

from pydantic import AliasChoices, ConfigDict, Field as PydanticField, field_validator
from sqlmodel import SQLModel, Field


class UserSummary(SQLModel):
    """
    Public profile used for enrichment (owner, collaborators, inviter).

    Also the shape of the "Unknown User" placeholder, which is why every
    field but `id` has a default.
    """

    id: int
    public_name: str = "Unknown User"
    icon_url: str | None = None


class UserRead(UserSummary):
    """Full public profile returned by /me and /users/{id}."""

    created_at: datetime | None = None


class LoginRequest(SQLModel):
    """
    Development login: exchange a known username for a bearer token.

    Accepts {"user": "alice"} as well as {"username": "alice"}.
    """

    model_config = ConfigDict(extra="ignore")

    user: str = PydanticField(
        min_length=1,
        max_length=50,
        validation_alias=AliasChoices("user", "username"),
    )

    @field_validator("user")
    @classmethod
    def normalize_user(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("user cannot be empty")
        return v


class TokenResponse(SQLModel):
    access_token: str
    token_type: str = "bearer"
