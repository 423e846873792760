import asyncio
from typing import Any

from wishlist_hub.core.errors import AuthorizationError
from wishlist_hub.core.permissions import EditPolicy, Role, can_edit, can_view, resolve_role
from wishlist_hub.gateway.clients import ServiceClients


class PermissionResolver:
    """
    Resolves the caller's role on a wishlist from the list store (owner)
    and the access store (grant). Nothing is cached: every request
    resolves afresh.
    """

    def __init__(self, clients: ServiceClients, edit_policy: EditPolicy):
        self.clients = clients
        self.edit_policy = edit_policy

    async def resolve(self, user_id: int, wishlist_id: int) -> tuple[dict[str, Any], Role]:
        """
        Raises:
            NotFoundError: the wishlist does not exist.
        """
        wishlist, grant = await asyncio.gather(
            self.clients.wishlists.get_wishlist(wishlist_id),
            self.clients.collaboration.get_grant(wishlist_id, user_id),
        )
        grant_role = Role(grant["role"]) if grant else None
        return wishlist, resolve_role(wishlist["owner_id"], user_id, grant_role)

    async def require_view(self, user_id: int, wishlist_id: int) -> tuple[dict[str, Any], Role]:
        wishlist, role = await self.resolve(user_id, wishlist_id)
        if not can_view(role):
            raise AuthorizationError("access denied")
        return wishlist, role

    async def require_edit(self, user_id: int, wishlist_id: int) -> tuple[dict[str, Any], Role]:
        wishlist, role = await self.resolve(user_id, wishlist_id)
        if not can_edit(role, self.edit_policy):
            raise AuthorizationError("insufficient permissions")
        return wishlist, role

    async def require_owner(self, user_id: int, wishlist_id: int) -> dict[str, Any]:
        wishlist, role = await self.resolve(user_id, wishlist_id)
        if role is not Role.OWNER:
            raise AuthorizationError("owner required")
        return wishlist
