from sqlmodel import Session

from wishlist_hub.core.errors import NotFoundError
from wishlist_hub.models.wishlist import Wishlist, WishlistItem
from wishlist_hub.repositories.wishlist_repo import WishlistRepository
from wishlist_hub.schemas.wishlist import WishlistCreate, WishlistItemCreate


class WishlistService:
    """
    Business logic for the list store.

    The store trusts its caller (the gateway) for authorization; it only
    guarantees referential sanity: items belong to an existing list and are
    always returned in (priority, id) order.
    """

    def __init__(self, repo: WishlistRepository):
        self.repo = repo

    # ----- Wishlists -----

    def get_wishlist(self, session: Session, wishlist_id: int) -> Wishlist:
        wishlist = self.repo.get_by_id(session, wishlist_id)
        if not wishlist:
            raise NotFoundError("wishlist not found")
        return wishlist

    def list_for_owner(self, session: Session, owner_id: int) -> list[Wishlist]:
        return self.repo.list_for_owner(session, owner_id)

    def list_by_ids(self, session: Session, wishlist_ids: list[int]) -> list[Wishlist]:
        return self.repo.list_by_ids(session, wishlist_ids)

    def create_wishlist(
        self,
        session: Session,
        owner_id: int,
        payload: WishlistCreate,
    ) -> Wishlist:
        wishlist = Wishlist(
            name=payload.name,
            owner_id=owner_id,
            privacy=payload.privacy,
        )
        return self.repo.create(session, wishlist)

    # ----- Items -----

    def list_items(self, session: Session, wishlist_id: int) -> list[WishlistItem]:
        self.get_wishlist(session, wishlist_id)
        return self.repo.list_items(session, wishlist_id)

    def add_item(
        self,
        session: Session,
        wishlist_id: int,
        added_by: int,
        payload: WishlistItemCreate,
    ) -> WishlistItem:
        self.get_wishlist(session, wishlist_id)
        item = WishlistItem(
            wishlist_id=wishlist_id,
            product_id=payload.product_id,
            title=payload.title,
            priority=payload.priority,
            added_by=added_by,
        )
        return self.repo.create_item(session, item)

    def remove_item(self, session: Session, wishlist_id: int, item_id: int) -> None:
        item = self.repo.get_item(session, wishlist_id, item_id)
        if not item:
            raise NotFoundError("item not found")
        self.repo.delete_item(session, item)
