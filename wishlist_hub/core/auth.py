from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, Header, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from wishlist_hub.core.config import Settings
from wishlist_hub.core.errors import AuthenticationError

# HTTP Bearer scheme:
# - auto_error=False => a missing Authorization header does not raise here,
#   so we can answer with our own "missing token" error envelope.
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The verified caller: user id plus the display name baked into the token."""

    id: int
    name: str | None = None


def create_access_token(settings: Settings, user_id: int, name: str | None) -> str:
    """
    Sign a bearer token for `user_id`.

    Claims:
      - sub: user id (string, as JWT requires)
      - name: public display name
      - exp: now + ACCESS_TOKEN_EXPIRE_DAYS
    """
    expires_at = datetime.now(timezone.utc) + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    claims = {"sub": str(user_id), "name": name, "exp": expires_at}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_access_token(settings: Settings, token: str) -> Principal:
    """
    Verify a bearer token and extract the principal.

    Verification covers signature and expiry. A token that verifies but
    carries no integer `sub` is treated as invalid too.

    Raises:
        AuthenticationError("invalid token")
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
        )
    except JWTError:
        raise AuthenticationError("invalid token")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthenticationError("invalid token")

    return Principal(id=user_id, name=payload.get("name"))


def require_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """
    Authentication gate for every non-public route.

    Reads the settings from the app that is serving the request, so the same
    dependency works in the gateway and in the identity service.

    Raises:
        AuthenticationError("missing token"): no bearer credential.
        AuthenticationError("invalid token"): bad signature, expired, malformed.
    """
    if credentials is None:
        raise AuthenticationError("missing token")
    return decode_access_token(request.app.state.settings, credentials.credentials)


def require_actor_id(x_user_id: int = Header(description="Acting user id, set by the gateway")) -> int:
    """
    Acting user for leaf services.

    Leaves sit behind the gateway and trust it: the gateway has already
    verified the bearer token and forwards the caller's id in `X-User-Id`.
    """
    return x_user_id
