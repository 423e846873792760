from fastapi import APIRouter, Depends

from wishlist_hub.core.auth import Principal, require_principal
from wishlist_hub.gateway.deps import get_invitation_flow
from wishlist_hub.gateway.invitations import InvitationFlow
from wishlist_hub.schemas.access import AcceptResult, InvitationAccept, InvitationPreview

router = APIRouter(prefix="/invites", tags=["Invitations"])


@router.get("/{token}", response_model=InvitationPreview)
async def preview_invitation(
    token: str,
    flow: InvitationFlow = Depends(get_invitation_flow),
):
    """
    Public preview so the invitee can see what they are joining.
    """
    return await flow.preview(token)


@router.post("/{token}/accept", response_model=AcceptResult)
async def accept_invitation(
    token: str,
    payload: InvitationAccept | None = None,
    principal: Principal = Depends(require_principal),
    flow: InvitationFlow = Depends(get_invitation_flow),
):
    """
    Join the invited wishlist with the invitation's role.

    Body (optional): {"display_name": "..."}
    """
    body = payload.model_dump(mode="json", exclude_unset=True) if payload else {}
    return await flow.accept(token, principal.id, body)
