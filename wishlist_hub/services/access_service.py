import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlmodel import Session

from wishlist_hub.core.errors import NotFoundError, ValidationError
from wishlist_hub.core.permissions import AcceptPolicy, Role
from wishlist_hub.models.access import AccessGrant, Invitation
from wishlist_hub.repositories.access_repo import AccessRepository
from wishlist_hub.schemas.access import AccessGrantUpdate, InvitationAccept

TOKEN_BYTES = 24


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AccessService:
    """
    Business logic for the access store: collaborator grants and invitations.

    Responsibilities:
      - grant listing / update / revocation
      - invitation issuing (unguessable token, absolute expiry)
      - invitation acceptance under the configured AcceptPolicy

    Invariants:
      - an invitation is usable only while expires_at > now
      - acceptance grants exactly the role fixed on the invitation
      - at most one grant per (wishlist, user)
    """

    def __init__(
        self,
        repo: AccessRepository,
        invite_ttl: timedelta,
        accept_policy: AcceptPolicy,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repo = repo
        self.invite_ttl = invite_ttl
        self.accept_policy = accept_policy
        self.clock = clock

    # ----- Grants -----

    def list_for_wishlist(self, session: Session, wishlist_id: int) -> list[AccessGrant]:
        return self.repo.list_for_wishlist(session, wishlist_id)

    def list_for_user(self, session: Session, user_id: int) -> list[AccessGrant]:
        return self.repo.list_for_user(session, user_id)

    def get_grant(self, session: Session, wishlist_id: int, user_id: int) -> AccessGrant:
        grant = self.repo.get_grant(session, wishlist_id, user_id)
        if not grant:
            raise NotFoundError("access record not found")
        return grant

    def update_grant(
        self,
        session: Session,
        wishlist_id: int,
        user_id: int,
        payload: AccessGrantUpdate,
    ) -> AccessGrant:
        """
        Partial update of an existing grant (role and/or display name).
        """
        grant = self.get_grant(session, wishlist_id, user_id)

        if payload.role is not None:
            grant.role = payload.role.value

        if "display_name" in payload.model_fields_set:
            grant.display_name = payload.display_name

        return self.repo.update_grant(session, grant)

    def revoke_grant(self, session: Session, wishlist_id: int, user_id: int) -> None:
        grant = self.get_grant(session, wishlist_id, user_id)
        self.repo.delete_grant(session, grant)

    # ----- Invitations -----

    def create_invitation(
        self,
        session: Session,
        wishlist_id: int,
        created_by: int,
        role: Role,
    ) -> Invitation:
        now = self.clock()
        invitation = Invitation(
            token=secrets.token_urlsafe(TOKEN_BYTES),
            wishlist_id=wishlist_id,
            role=role.value,
            created_by=created_by,
            created_at=now,
            expires_at=now + self.invite_ttl,
        )
        return self.repo.create_invitation(session, invitation)

    def get_active_invitation(self, session: Session, token: str) -> Invitation:
        """
        Raises:
            NotFoundError: unknown token, or expires_at <= now.
        """
        invitation = self.repo.get_active_invitation(session, token, self.clock())
        if not invitation:
            raise NotFoundError("invite not found or expired")
        return invitation

    def accept_invitation(
        self,
        session: Session,
        token: str,
        user_id: int,
        payload: InvitationAccept,
    ) -> AccessGrant:
        """
        Turn an active invitation into a grant for `user_id`.

        AcceptPolicy.UPDATE: upsert; replaying is idempotent.
        AcceptPolicy.REJECT: a second acceptance by the same user fails.
        """
        invitation = self.get_active_invitation(session, token)
        values = dict(
            wishlist_id=invitation.wishlist_id,
            user_id=user_id,
            role=invitation.role,
            display_name=payload.display_name,
            invited_by=invitation.created_by,
            invited_at=self.clock(),
        )

        if self.accept_policy is AcceptPolicy.UPDATE:
            return self.repo.upsert_grant(session, **values)

        grant = self.repo.insert_grant_if_absent(session, **values)
        if grant is None:
            raise ValidationError("user already has access to this wishlist")
        return grant
