from fastapi import Request

from wishlist_hub.core.permissions import EditPolicy
from wishlist_hub.gateway.clients import ServiceClients
from wishlist_hub.gateway.invitations import InvitationFlow
from wishlist_hub.gateway.permissions import PermissionResolver


def get_clients(request: Request) -> ServiceClients:
    return request.app.state.clients


def get_resolver(request: Request) -> PermissionResolver:
    settings = request.app.state.settings
    return PermissionResolver(get_clients(request), EditPolicy(settings.EDIT_POLICY))


def get_invitation_flow(request: Request) -> InvitationFlow:
    settings = request.app.state.settings
    return InvitationFlow(get_clients(request), get_resolver(request), settings.FRONTEND_BASE_URL)
