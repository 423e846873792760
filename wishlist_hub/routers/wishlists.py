from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from wishlist_hub.core.auth import require_actor_id
from wishlist_hub.core.query import parse_ids
from wishlist_hub.database import get_session
from wishlist_hub.repositories.wishlist_repo import WishlistRepository
from wishlist_hub.schemas.wishlist import (
    WishlistCreate,
    WishlistItemCreate,
    WishlistItemRead,
    WishlistRead,
)
from wishlist_hub.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlists", tags=["List Store"])

repo = WishlistRepository()
service = WishlistService(repo)


# -------- Wishlists --------


@router.get("", response_model=list[WishlistRead])
def list_wishlists(
    owner_id: int = Query(description="Return lists owned by this user"),
    session: Session = Depends(get_session),
):
    return service.list_for_owner(session, owner_id)


@router.get("/byIds", response_model=list[WishlistRead])
def list_wishlists_by_ids(
    ids: str | None = Query(default=None, description="Comma-separated wishlist ids"),
    session: Session = Depends(get_session),
):
    """
    Bulk lookup used by the gateway. Unknown ids are omitted.
    """
    return service.list_by_ids(session, parse_ids(ids))


@router.get("/{wishlist_id}", response_model=WishlistRead)
def get_wishlist(
    wishlist_id: int,
    session: Session = Depends(get_session),
):
    return service.get_wishlist(session, wishlist_id)


@router.post("", response_model=WishlistRead, status_code=status.HTTP_201_CREATED)
def create_wishlist(
    payload: WishlistCreate,
    actor_id: int = Depends(require_actor_id),
    session: Session = Depends(get_session),
):
    """
    Create a list owned by the acting user.
    """
    return service.create_wishlist(session, actor_id, payload)


# -------- Items --------


@router.get("/{wishlist_id}/items", response_model=list[WishlistItemRead])
def list_items(
    wishlist_id: int,
    session: Session = Depends(get_session),
):
    """
    Items ordered by priority, then id.
    """
    return service.list_items(session, wishlist_id)


@router.post(
    "/{wishlist_id}/items",
    response_model=WishlistItemRead,
    status_code=status.HTTP_201_CREATED,
)
def add_item(
    wishlist_id: int,
    payload: WishlistItemCreate,
    actor_id: int = Depends(require_actor_id),
    session: Session = Depends(get_session),
):
    return service.add_item(session, wishlist_id, actor_id, payload)


@router.delete("/{wishlist_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_item(
    wishlist_id: int,
    item_id: int,
    session: Session = Depends(get_session),
):
    service.remove_item(session, wishlist_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
