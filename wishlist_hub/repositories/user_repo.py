from sqlalchemy import func
from sqlmodel import Session, col, select

from wishlist_hub.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, session: Session, user_id: int) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_username(self, session: Session, username: str) -> User | None:
        """Return a User by unique login handle, or None if not found."""
        stmt = select(User).where(User.username == username)
        return session.exec(stmt).first()

    def list_by_ids(self, session: Session, user_ids: list[int]) -> list[User]:
        """
        Bulk lookup. Unknown ids are simply absent from the result.
        """
        if not user_ids:
            return []
        stmt = select(User).where(col(User.id).in_(user_ids)).order_by(User.id)
        return session.exec(stmt).all()

    def count(self, session: Session) -> int:
        return session.exec(select(func.count()).select_from(User)).one()
