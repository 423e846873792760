from datetime import datetime

from pydantic import AliasChoices, ConfigDict, Field as PydanticField, field_validator
from sqlmodel import SQLModel, Field

from wishlist_hub.core.permissions import Role, ensure_grantable
from wishlist_hub.schemas.user import UserSummary


def _normalize_display_name(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    return v or None


class AccessGrantRead(SQLModel):
    wishlist_id: int
    user_id: int
    role: Role
    display_name: str | None = None
    invited_by: int | None = None
    invited_at: datetime | None = None


class AccessGrantUpdate(SQLModel):
    """
    Owner-side edit of a collaborator. Both fields optional.

    Only grantable roles are accepted; "owner" and "none" are rejected
    at the boundary.
    """

    model_config = ConfigDict(extra="forbid")

    role: Role | None = None
    display_name: str | None = Field(default=None, max_length=100)

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: Role | None) -> Role | None:
        if v is None:
            return v
        return ensure_grantable(v)

    @field_validator("display_name")
    @classmethod
    def normalize_display_name(cls, v: str | None) -> str | None:
        return _normalize_display_name(v)


class Collaborator(AccessGrantRead):
    """Grant enriched with the collaborator's public profile."""

    user: UserSummary


class InvitationCreate(SQLModel):
    """
    Payload for creating an invitation.

    `access_type` is accepted as an alias of `role`.
    """

    model_config = ConfigDict(extra="forbid")

    role: Role = PydanticField(
        default=Role.VIEW_ONLY,
        validation_alias=AliasChoices("role", "access_type"),
    )

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: Role) -> Role:
        return ensure_grantable(v)


class InvitationRead(SQLModel):
    token: str
    wishlist_id: int
    role: Role
    created_by: int | None = None
    created_at: datetime | None = None
    expires_at: datetime


class InvitationCreated(InvitationRead):
    invite_link: str


class InvitationPreview(InvitationRead):
    """Public preview, enough for a human to confirm before accepting."""

    wishlist_name: str
    inviter: UserSummary | None = None


class InvitationAccept(SQLModel):
    model_config = ConfigDict(extra="forbid")

    display_name: str | None = Field(default=None, max_length=100)

    @field_validator("display_name")
    @classmethod
    def normalize_display_name(cls, v: str | None) -> str | None:
        return _normalize_display_name(v)


class AcceptResult(SQLModel):
    wishlist_id: int
    user_id: int
    role: Role
    display_name: str | None = None
