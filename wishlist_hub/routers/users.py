from fastapi import APIRouter, Depends, Query, Request
from sqlmodel import Session

from wishlist_hub.core.auth import Principal, require_principal
from wishlist_hub.core.query import parse_ids
from wishlist_hub.database import get_session
from wishlist_hub.repositories.user_repo import UserRepository
from wishlist_hub.schemas.user import LoginRequest, TokenResponse, UserRead, UserSummary
from wishlist_hub.services.user_service import UserService

router = APIRouter(tags=["Identity"])

repo = UserRepository()
service = UserService(repo)


@router.post("/auth/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    request: Request,
    session: Session = Depends(get_session),
):
    """
    Development login.

    Body: {"user": "alice" | "bob" | "carol" | "dave"}
    Returns a bearer token valid for ACCESS_TOKEN_EXPIRE_DAYS.
    """
    return service.login(session, request.app.state.settings, payload)


@router.get("/me", response_model=UserRead)
def read_me(
    session: Session = Depends(get_session),
    principal: Principal = Depends(require_principal),
):
    """
    Return the authenticated user's public profile.
    """
    return service.get_me(session, principal)


@router.get("/users", response_model=list[UserSummary])
def list_users(
    ids: str | None = Query(default=None, description="Comma-separated user ids"),
    session: Session = Depends(get_session),
):
    """
    User directory for bulk lookups (`?ids=1,2,3`).

    Unknown ids are omitted; no ids => empty list.
    """
    return service.list_users(session, parse_ids(ids))


@router.get("/users/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    session: Session = Depends(get_session),
):
    """
    Public profile of any user.
    """
    return service.get_user(session, user_id)
