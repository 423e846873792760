from datetime import timedelta

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlmodel import Session

from wishlist_hub.core.auth import require_actor_id
from wishlist_hub.core.permissions import AcceptPolicy, Role
from wishlist_hub.database import get_session
from wishlist_hub.repositories.access_repo import AccessRepository
from wishlist_hub.schemas.access import (
    AccessGrantRead,
    AccessGrantUpdate,
    InvitationAccept,
    InvitationCreate,
    InvitationRead,
)
from wishlist_hub.services.access_service import AccessService

router = APIRouter(tags=["Access Store"])

repo = AccessRepository()


def get_access_service(request: Request) -> AccessService:
    """
    Build the service from the serving app's settings.

    Tests may pin `app.state.clock` to control invitation expiry.
    """
    settings = request.app.state.settings
    clock = getattr(request.app.state, "clock", None)
    kwargs = {"clock": clock} if clock is not None else {}
    return AccessService(
        repo,
        invite_ttl=timedelta(hours=settings.INVITE_TTL_HOURS),
        accept_policy=AcceptPolicy(settings.ACCEPT_POLICY),
        **kwargs,
    )


# -------- Grants --------


@router.get("/access", response_model=list[AccessGrantRead])
def list_access_for_user(
    user_id: int = Query(description="Grants held by this user"),
    session: Session = Depends(get_session),
    service: AccessService = Depends(get_access_service),
):
    return service.list_for_user(session, user_id)


@router.get("/wishlists/{wishlist_id}/access", response_model=list[AccessGrantRead])
def list_access_for_wishlist(
    wishlist_id: int,
    session: Session = Depends(get_session),
    service: AccessService = Depends(get_access_service),
):
    return service.list_for_wishlist(session, wishlist_id)


@router.get("/wishlists/{wishlist_id}/access/{user_id}", response_model=AccessGrantRead)
def get_access(
    wishlist_id: int,
    user_id: int,
    session: Session = Depends(get_session),
    service: AccessService = Depends(get_access_service),
):
    return service.get_grant(session, wishlist_id, user_id)


@router.patch("/wishlists/{wishlist_id}/access/{user_id}", response_model=AccessGrantRead)
def update_access(
    wishlist_id: int,
    user_id: int,
    payload: AccessGrantUpdate,
    session: Session = Depends(get_session),
    service: AccessService = Depends(get_access_service),
):
    """
    Change a collaborator's role and/or display name.
    """
    return service.update_grant(session, wishlist_id, user_id, payload)


@router.delete("/wishlists/{wishlist_id}/access/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_access(
    wishlist_id: int,
    user_id: int,
    session: Session = Depends(get_session),
    service: AccessService = Depends(get_access_service),
):
    service.revoke_grant(session, wishlist_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -------- Invitations --------


@router.post(
    "/wishlists/{wishlist_id}/invites",
    response_model=InvitationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_invitation(
    wishlist_id: int,
    payload: InvitationCreate | None = None,
    actor_id: int = Depends(require_actor_id),
    session: Session = Depends(get_session),
    service: AccessService = Depends(get_access_service),
):
    """
    Issue an invitation token expiring INVITE_TTL_HOURS from now.

    Body is optional; the role defaults to view_only.
    """
    role = payload.role if payload else Role.VIEW_ONLY
    return service.create_invitation(session, wishlist_id, actor_id, role)


@router.get("/invites/{token}", response_model=InvitationRead)
def get_invitation(
    token: str,
    session: Session = Depends(get_session),
    service: AccessService = Depends(get_access_service),
):
    """
    Active invitation only; expired or unknown tokens are 404.
    """
    return service.get_active_invitation(session, token)


@router.post("/invites/{token}/accept", response_model=AccessGrantRead)
def accept_invitation(
    token: str,
    payload: InvitationAccept,
    actor_id: int = Depends(require_actor_id),
    session: Session = Depends(get_session),
    service: AccessService = Depends(get_access_service),
):
    """
    Grant the acting user the invitation's role (see ACCEPT_POLICY).
    """
    return service.accept_invitation(session, token, actor_id, payload)
