from datetime import datetime

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, select

from wishlist_hub.models.access import AccessGrant, Invitation

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _dialect_insert(session: Session):
    """
    Pick the INSERT construct that supports ON CONFLICT for the bound dialect.
    """
    dialect = session.get_bind().dialect.name
    try:
        return _INSERTS[dialect]
    except KeyError:
        raise RuntimeError(f"ON CONFLICT upserts are not supported on {dialect!r}")


class AccessRepository:
    """
    Data access layer for AccessGrant & Invitation.

    Grant writes that may race (two acceptances for the same pair) are single
    INSERT ... ON CONFLICT statements, never read-then-write.
    """

    # ----- Grants -----

    def get_grant(self, session: Session, wishlist_id: int, user_id: int) -> AccessGrant | None:
        return session.get(AccessGrant, (wishlist_id, user_id), populate_existing=True)

    def list_for_wishlist(self, session: Session, wishlist_id: int) -> list[AccessGrant]:
        stmt = (
            select(AccessGrant)
            .where(AccessGrant.wishlist_id == wishlist_id)
            .order_by(AccessGrant.invited_at, AccessGrant.user_id)
        )
        return session.exec(stmt).all()

    def list_for_user(self, session: Session, user_id: int) -> list[AccessGrant]:
        stmt = (
            select(AccessGrant)
            .where(AccessGrant.user_id == user_id)
            .order_by(AccessGrant.wishlist_id)
        )
        return session.exec(stmt).all()

    def upsert_grant(
        self,
        session: Session,
        *,
        wishlist_id: int,
        user_id: int,
        role: str,
        display_name: str | None,
        invited_by: int | None,
        invited_at: datetime,
    ) -> AccessGrant:
        """
        Insert the grant, or overwrite the role of the existing one.

        An existing display_name is kept when `display_name` is None.
        """
        insert = _dialect_insert(session)
        table = AccessGrant.__table__
        stmt = insert(table).values(
            wishlist_id=wishlist_id,
            user_id=user_id,
            role=role,
            display_name=display_name,
            invited_by=invited_by,
            invited_at=invited_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.wishlist_id, table.c.user_id],
            set_={
                "role": stmt.excluded.role,
                "display_name": func.coalesce(stmt.excluded.display_name, table.c.display_name),
            },
        )
        session.execute(stmt)
        session.commit()
        return self.get_grant(session, wishlist_id, user_id)

    def insert_grant_if_absent(
        self,
        session: Session,
        *,
        wishlist_id: int,
        user_id: int,
        role: str,
        display_name: str | None,
        invited_by: int | None,
        invited_at: datetime,
    ) -> AccessGrant | None:
        """
        Insert the grant unless one already exists for the pair.

        Returns:
            The new grant, or None if the pair already had one.
        """
        insert = _dialect_insert(session)
        table = AccessGrant.__table__
        stmt = (
            insert(table)
            .values(
                wishlist_id=wishlist_id,
                user_id=user_id,
                role=role,
                display_name=display_name,
                invited_by=invited_by,
                invited_at=invited_at,
            )
            .on_conflict_do_nothing(index_elements=[table.c.wishlist_id, table.c.user_id])
        )
        result = session.execute(stmt)
        session.commit()
        if result.rowcount == 0:
            return None
        return self.get_grant(session, wishlist_id, user_id)

    def update_grant(self, session: Session, grant: AccessGrant) -> AccessGrant:
        session.add(grant)
        session.commit()
        session.refresh(grant)
        return grant

    def delete_grant(self, session: Session, grant: AccessGrant) -> None:
        session.delete(grant)
        session.commit()

    # ----- Invitations -----

    def create_invitation(self, session: Session, invitation: Invitation) -> Invitation:
        session.add(invitation)
        session.commit()
        session.refresh(invitation)
        return invitation

    def get_active_invitation(
        self,
        session: Session,
        token: str,
        now: datetime,
    ) -> Invitation | None:
        """Invitation for `token` if it expires strictly after `now`."""
        stmt = select(Invitation).where(
            Invitation.token == token,
            Invitation.expires_at > now,
        )
        return session.exec(stmt).first()
