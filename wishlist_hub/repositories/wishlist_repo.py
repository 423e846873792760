from sqlmodel import Session, col, select

from wishlist_hub.models.wishlist import Wishlist, WishlistItem


class WishlistRepository:
    """
    Data access layer for Wishlist & WishlistItem.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Wishlists -----

    def get_by_id(self, session: Session, wishlist_id: int) -> Wishlist | None:
        return session.get(Wishlist, wishlist_id)

    def list_by_ids(self, session: Session, wishlist_ids: list[int]) -> list[Wishlist]:
        if not wishlist_ids:
            return []
        stmt = select(Wishlist).where(col(Wishlist.id).in_(wishlist_ids)).order_by(Wishlist.id)
        return session.exec(stmt).all()

    def list_for_owner(self, session: Session, owner_id: int) -> list[Wishlist]:
        stmt = select(Wishlist).where(Wishlist.owner_id == owner_id).order_by(Wishlist.id)
        return session.exec(stmt).all()

    def create(self, session: Session, wishlist: Wishlist) -> Wishlist:
        session.add(wishlist)
        session.commit()
        session.refresh(wishlist)
        return wishlist

    # ----- Items -----

    def list_items(self, session: Session, wishlist_id: int) -> list[WishlistItem]:
        """Items of a list, ordered by priority then id (both ascending)."""
        stmt = (
            select(WishlistItem)
            .where(WishlistItem.wishlist_id == wishlist_id)
            .order_by(WishlistItem.priority, WishlistItem.id)
        )
        return session.exec(stmt).all()

    def get_item(
        self,
        session: Session,
        wishlist_id: int,
        item_id: int,
    ) -> WishlistItem | None:
        stmt = select(WishlistItem).where(
            WishlistItem.id == item_id,
            WishlistItem.wishlist_id == wishlist_id,
        )
        return session.exec(stmt).first()

    def create_item(self, session: Session, item: WishlistItem) -> WishlistItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete_item(self, session: Session, item: WishlistItem) -> None:
        session.delete(item)
        session.commit()
