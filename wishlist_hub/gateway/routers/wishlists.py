from fastapi import APIRouter, Depends, Response, status

from wishlist_hub.core.auth import Principal, require_principal
from wishlist_hub.core.permissions import Role
from wishlist_hub.gateway.clients import ServiceClients
from wishlist_hub.gateway.deps import get_clients, get_invitation_flow, get_resolver
from wishlist_hub.gateway.enrichment import (
    collaborators,
    load_enriched_items,
    owned_wishlists,
    product_title,
    shared_wishlists,
    wishlist_detail,
)
from wishlist_hub.gateway.invitations import InvitationFlow
from wishlist_hub.gateway.permissions import PermissionResolver
from wishlist_hub.schemas.access import (
    AccessGrantRead,
    AccessGrantUpdate,
    Collaborator,
    InvitationCreate,
    InvitationCreated,
)
from wishlist_hub.schemas.wishlist import (
    EnrichedItem,
    SharedWishlist,
    WishlistCreate,
    WishlistDetail,
    WishlistItemCreate,
    WishlistItemRead,
    WishlistRead,
    WishlistWithOwner,
)

router = APIRouter(prefix="/wishlists", tags=["Wishlists"])


# -------- Collections --------


@router.get("/mine", response_model=list[WishlistWithOwner])
async def my_wishlists(
    principal: Principal = Depends(require_principal),
    clients: ServiceClients = Depends(get_clients),
):
    """
    Lists owned by the caller.
    """
    return await owned_wishlists(clients, principal.id)


@router.get("/friends", response_model=list[SharedWishlist])
async def friends_wishlists(
    principal: Principal = Depends(require_principal),
    clients: ServiceClients = Depends(get_clients),
):
    """
    Lists shared with the caller, each with the caller's role.
    """
    return await shared_wishlists(clients, principal.id)


@router.post("", response_model=WishlistRead, status_code=status.HTTP_201_CREATED)
async def create_wishlist(
    payload: WishlistCreate,
    principal: Principal = Depends(require_principal),
    clients: ServiceClients = Depends(get_clients),
):
    return await clients.wishlists.create_wishlist(principal.id, payload.model_dump(mode="json"))


# -------- Single wishlist --------


@router.get("/{wishlist_id}", response_model=WishlistDetail)
async def get_wishlist(
    wishlist_id: int,
    principal: Principal = Depends(require_principal),
    resolver: PermissionResolver = Depends(get_resolver),
    clients: ServiceClients = Depends(get_clients),
):
    """
    Wishlist detail: owner profile, caller's role and items with products.

    Requires view access.
    """
    wishlist, role = await resolver.require_view(principal.id, wishlist_id)
    return await wishlist_detail(clients, wishlist, role.value)


@router.get("/{wishlist_id}/items", response_model=list[EnrichedItem])
async def list_items(
    wishlist_id: int,
    principal: Principal = Depends(require_principal),
    resolver: PermissionResolver = Depends(get_resolver),
    clients: ServiceClients = Depends(get_clients),
):
    await resolver.require_view(principal.id, wishlist_id)
    return await load_enriched_items(clients, wishlist_id)


@router.post(
    "/{wishlist_id}/items",
    response_model=WishlistItemRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_item(
    wishlist_id: int,
    payload: WishlistItemCreate,
    principal: Principal = Depends(require_principal),
    resolver: PermissionResolver = Depends(get_resolver),
    clients: ServiceClients = Depends(get_clients),
):
    """
    Add an item. Requires edit access.

    Without a `title`, the catalog title is copied onto the item so the list
    still reads sensibly if the product later disappears.
    """
    await resolver.require_edit(principal.id, wishlist_id)

    body = payload.model_dump(mode="json")
    if body["title"] is None:
        body["title"] = await product_title(clients, payload.product_id)

    return await clients.wishlists.add_item(wishlist_id, principal.id, body)


@router.delete("/{wishlist_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_item(
    wishlist_id: int,
    item_id: int,
    principal: Principal = Depends(require_principal),
    resolver: PermissionResolver = Depends(get_resolver),
    clients: ServiceClients = Depends(get_clients),
):
    await resolver.require_edit(principal.id, wishlist_id)
    await clients.wishlists.remove_item(wishlist_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -------- Sharing (owner only) --------


@router.get("/{wishlist_id}/access", response_model=list[Collaborator])
async def list_collaborators(
    wishlist_id: int,
    principal: Principal = Depends(require_principal),
    resolver: PermissionResolver = Depends(get_resolver),
    clients: ServiceClients = Depends(get_clients),
):
    await resolver.require_owner(principal.id, wishlist_id)
    return await collaborators(clients, wishlist_id)


@router.put("/{wishlist_id}/access/{user_id}", response_model=AccessGrantRead)
async def update_collaborator(
    wishlist_id: int,
    user_id: int,
    payload: AccessGrantUpdate,
    principal: Principal = Depends(require_principal),
    resolver: PermissionResolver = Depends(get_resolver),
    clients: ServiceClients = Depends(get_clients),
):
    """
    Change a collaborator's role and/or display name.
    """
    await resolver.require_owner(principal.id, wishlist_id)
    body = payload.model_dump(mode="json", exclude_unset=True)
    return await clients.collaboration.update_grant(wishlist_id, user_id, body)


@router.delete("/{wishlist_id}/access/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_collaborator(
    wishlist_id: int,
    user_id: int,
    principal: Principal = Depends(require_principal),
    resolver: PermissionResolver = Depends(get_resolver),
    clients: ServiceClients = Depends(get_clients),
):
    await resolver.require_owner(principal.id, wishlist_id)
    await clients.collaboration.revoke_grant(wishlist_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{wishlist_id}/invites",
    response_model=InvitationCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_invitation(
    wishlist_id: int,
    payload: InvitationCreate | None = None,
    principal: Principal = Depends(require_principal),
    flow: InvitationFlow = Depends(get_invitation_flow),
):
    """
    Create a shareable invitation link. Owner only.

    Body (optional): {"role": "view_only" | "view_edit"} (`access_type` also
    accepted). Without a body the invitation grants view_only.
    """
    role = payload.role if payload else Role.VIEW_ONLY
    return await flow.create(wishlist_id, principal.id, {"role": role.value})
