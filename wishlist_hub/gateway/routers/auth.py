from fastapi import APIRouter, Depends

from wishlist_hub.core.auth import Principal, require_principal
from wishlist_hub.core.query import parse_ids
from wishlist_hub.gateway.clients import ServiceClients
from wishlist_hub.gateway.deps import get_clients
from wishlist_hub.schemas.user import LoginRequest, TokenResponse, UserRead, UserSummary

router = APIRouter(tags=["Auth"])


@router.post("/auth/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    clients: ServiceClients = Depends(get_clients),
):
    """
    Development login, proxied to the identity provider.

    Body: {"user": "alice"}
    """
    return await clients.identity.login({"user": payload.user})


@router.get("/me", response_model=UserRead)
@router.get("/api/me", response_model=UserRead, include_in_schema=False)
async def read_me(
    principal: Principal = Depends(require_principal),
    clients: ServiceClients = Depends(get_clients),
):
    return await clients.identity.get_user(principal.id)


@router.get("/users", response_model=list[UserSummary])
async def list_users(
    ids: str | None = None,
    principal: Principal = Depends(require_principal),
    clients: ServiceClients = Depends(get_clients),
):
    return await clients.identity.get_many(parse_ids(ids))


@router.get("/users/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    principal: Principal = Depends(require_principal),
    clients: ServiceClients = Depends(get_clients),
):
    return await clients.identity.get_user(user_id)
