import asyncio
import logging
from typing import Any

from wishlist_hub.core.permissions import Role
from wishlist_hub.gateway.clients import ServiceClients
from wishlist_hub.gateway.enrichment import attach_one, user_placeholder, wishlist_summary
from wishlist_hub.gateway.permissions import PermissionResolver

logger = logging.getLogger(__name__)


class InvitationFlow:
    """
    Gateway side of the invitation lifecycle: create (owner only),
    public preview, and accept.

    Token generation, expiry and the grant write all happen in the access
    store; this class adds authorization, the shareable link and
    enrichment.
    """

    def __init__(self, clients: ServiceClients, resolver: PermissionResolver, frontend_base_url: str):
        self.clients = clients
        self.resolver = resolver
        self.frontend_base_url = frontend_base_url.rstrip("/")

    def invite_link(self, token: str) -> str:
        return f"{self.frontend_base_url}/wishlist/friends/invite/{token}"

    async def create(self, wishlist_id: int, actor_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Raises:
            NotFoundError: wishlist missing.
            AuthorizationError("owner required"): caller is not the owner.
        """
        await self.resolver.require_owner(actor_id, wishlist_id)
        invitation = await self.clients.collaboration.create_invitation(wishlist_id, actor_id, payload)
        logger.info("Invitation created for wishlist %s by user %s", wishlist_id, actor_id)
        return {**invitation, "invite_link": self.invite_link(invitation["token"])}

    async def preview(self, token: str) -> dict[str, Any]:
        """
        Public view of an active invitation: wishlist name and inviter
        profile, each degrading to a placeholder.

        Invitations without a recorded creator name the wishlist owner as
        inviter; if the wishlist is unavailable too, `inviter` is None.
        """
        invitation = await self.clients.collaboration.get_invitation(token)
        wishlist_id = invitation["wishlist_id"]
        inviter_id = invitation.get("created_by")

        if inviter_id is not None:
            wishlist, inviter = await asyncio.gather(
                wishlist_summary(self.clients, wishlist_id),
                attach_one(self.clients.identity, inviter_id, user_placeholder),
            )
        else:
            wishlist = await wishlist_summary(self.clients, wishlist_id)
            owner_id = wishlist.get("owner_id")
            inviter = None
            if owner_id is not None:
                inviter = await attach_one(self.clients.identity, owner_id, user_placeholder)

        return {**invitation, "wishlist_name": wishlist["name"], "inviter": inviter}

    async def accept(self, token: str, actor_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Accept on behalf of `actor_id`.

        The owner of the invited wishlist gets role "owner" back and nothing
        is written. Everyone else goes through the access store, which
        re-checks expiry and applies the accept policy.
        """
        invitation = await self.clients.collaboration.get_invitation(token)
        wishlist = await self.clients.wishlists.get_wishlist(invitation["wishlist_id"])

        if wishlist["owner_id"] == actor_id:
            return {
                "wishlist_id": wishlist["id"],
                "user_id": actor_id,
                "role": Role.OWNER.value,
                "display_name": None,
            }

        grant = await self.clients.collaboration.accept_invitation(token, actor_id, payload)
        logger.info(
            "User %s joined wishlist %s as %s", actor_id, grant["wishlist_id"], grant["role"]
        )
        return {
            "wishlist_id": grant["wishlist_id"],
            "user_id": grant["user_id"],
            "role": grant["role"],
            "display_name": grant.get("display_name"),
        }
