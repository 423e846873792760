"""
HTTP clients for the leaf services.

One `ServiceClient` per leaf wraps a shared `httpx.AsyncClient`. Leaf
failures come back as the same `AppError` subclasses the leaf raised, so a
404 from the list store is a `NotFoundError` here too. Transport failures
and timeouts become `UpstreamError`.

Clients that back enrichment implement the `Lookup` protocol.
"""

import logging
from typing import Any, Iterable, Protocol, TypeVar

import httpx

from wishlist_hub.core.config import Settings
from wishlist_hub.core.errors import NotFoundError, UpstreamError, error_for_status
from wishlist_hub.core.query import format_ids

logger = logging.getLogger(__name__)

K = TypeVar("K", contravariant=True)
V = TypeVar("V", covariant=True)


class Lookup(Protocol[K, V]):
    """Keyed access to entities owned by another service."""

    async def get(self, key: K) -> V | None:
        """The entity, or None when the owning service has no such key."""
        ...

    async def get_many(self, keys: Iterable[K]) -> list[V]:
        """Entities for the keys that exist; missing keys are omitted."""
        ...


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return None


class ServiceClient:
    """Thin JSON client for one leaf service."""

    def __init__(
        self,
        name: str,
        base_url: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.name = name
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        actor_id: int | None = None,
    ) -> httpx.Response:
        """
        Send one request and raise the mapped AppError on failure.

        `actor_id` is forwarded as `X-User-Id` for leaf routes that record
        who performed a write.
        """
        headers = {"X-User-Id": str(actor_id)} if actor_id is not None else None
        try:
            response = await self._client.request(method, path, params=params, json=json, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("%s service unreachable: %s %s (%s)", self.name, method, path, exc)
            raise UpstreamError(f"{self.name} service unavailable")

        if response.status_code >= 500:
            logger.warning("%s service error: %s %s -> %d", self.name, method, path, response.status_code)
            raise UpstreamError(f"{self.name} service error")
        if response.status_code >= 400:
            raise error_for_status(response.status_code, _error_message(response))
        return response

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self.request("GET", path, params=params)
        return response.json()

    async def get_or_none(self, path: str) -> Any:
        try:
            return await self.get_json(path)
        except NotFoundError:
            return None

    async def aclose(self) -> None:
        await self._client.aclose()


class IdentityClient(ServiceClient):
    """Identity provider: login and user profiles."""

    async def login(self, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self.request("POST", "/auth/login", json=payload)
        return response.json()

    async def get_user(self, user_id: int) -> dict[str, Any]:
        return await self.get_json(f"/users/{user_id}")

    async def get(self, key: int) -> dict[str, Any] | None:
        return await self.get_or_none(f"/users/{key}")

    async def get_many(self, keys: Iterable[int]) -> list[dict[str, Any]]:
        ids = format_ids(keys)
        if not ids:
            return []
        return await self.get_json("/users", params={"ids": ids})


class CatalogClient(ServiceClient):
    """Catalog store: products and categories."""

    async def list_products(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.get_json("/products", params=params)

    async def search_products(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.get_json("/products/search", params=params)

    async def get_product(self, product_id: int) -> dict[str, Any]:
        return await self.get_json(f"/products/{product_id}")

    async def list_categories(self) -> list[str]:
        return await self.get_json("/categories")

    async def get(self, key: int) -> dict[str, Any] | None:
        return await self.get_or_none(f"/products/{key}")

    async def get_many(self, keys: Iterable[int]) -> list[dict[str, Any]]:
        ids = format_ids(keys)
        if not ids:
            return []
        return await self.get_json("/products/byIds", params={"ids": ids})


class WishlistClient(ServiceClient):
    """List store: wishlists and their items."""

    async def get_wishlist(self, wishlist_id: int) -> dict[str, Any]:
        return await self.get_json(f"/wishlists/{wishlist_id}")

    async def list_for_owner(self, owner_id: int) -> list[dict[str, Any]]:
        return await self.get_json("/wishlists", params={"owner_id": owner_id})

    async def create_wishlist(self, actor_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self.request("POST", "/wishlists", json=payload, actor_id=actor_id)
        return response.json()

    async def list_items(self, wishlist_id: int) -> list[dict[str, Any]]:
        return await self.get_json(f"/wishlists/{wishlist_id}/items")

    async def add_item(self, wishlist_id: int, actor_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self.request(
            "POST", f"/wishlists/{wishlist_id}/items", json=payload, actor_id=actor_id
        )
        return response.json()

    async def remove_item(self, wishlist_id: int, item_id: int) -> None:
        await self.request("DELETE", f"/wishlists/{wishlist_id}/items/{item_id}")

    async def get(self, key: int) -> dict[str, Any] | None:
        return await self.get_or_none(f"/wishlists/{key}")

    async def get_many(self, keys: Iterable[int]) -> list[dict[str, Any]]:
        ids = format_ids(keys)
        if not ids:
            return []
        return await self.get_json("/wishlists/byIds", params={"ids": ids})


class CollaborationClient(ServiceClient):
    """Access store: grants and invitations."""

    async def get_grant(self, wishlist_id: int, user_id: int) -> dict[str, Any] | None:
        return await self.get_or_none(f"/wishlists/{wishlist_id}/access/{user_id}")

    async def list_for_wishlist(self, wishlist_id: int) -> list[dict[str, Any]]:
        return await self.get_json(f"/wishlists/{wishlist_id}/access")

    async def list_for_user(self, user_id: int) -> list[dict[str, Any]]:
        return await self.get_json("/access", params={"user_id": user_id})

    async def update_grant(self, wishlist_id: int, user_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self.request("PATCH", f"/wishlists/{wishlist_id}/access/{user_id}", json=payload)
        return response.json()

    async def revoke_grant(self, wishlist_id: int, user_id: int) -> None:
        await self.request("DELETE", f"/wishlists/{wishlist_id}/access/{user_id}")

    async def create_invitation(self, wishlist_id: int, actor_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self.request(
            "POST", f"/wishlists/{wishlist_id}/invites", json=payload, actor_id=actor_id
        )
        return response.json()

    async def get_invitation(self, token: str) -> dict[str, Any]:
        return await self.get_json(f"/invites/{token}")

    async def accept_invitation(self, token: str, actor_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self.request("POST", f"/invites/{token}/accept", json=payload, actor_id=actor_id)
        return response.json()


class ServiceClients:
    """The gateway's four downstream clients, opened together and closed together."""

    def __init__(self, settings: Settings, transports: dict[str, httpx.AsyncBaseTransport] | None = None):
        transports = transports or {}
        timeout = settings.UPSTREAM_TIMEOUT_SECONDS
        self.identity = IdentityClient(
            "identity", settings.IDENTITY_SERVICE_URL, timeout, transports.get("identity")
        )
        self.catalog = CatalogClient(
            "catalog", settings.CATALOG_SERVICE_URL, timeout, transports.get("catalog")
        )
        self.wishlists = WishlistClient(
            "wishlist", settings.WISHLIST_SERVICE_URL, timeout, transports.get("wishlist")
        )
        self.collaboration = CollaborationClient(
            "collaboration", settings.COLLABORATION_SERVICE_URL, timeout, transports.get("collaboration")
        )

    async def aclose(self) -> None:
        for client in (self.identity, self.catalog, self.wishlists, self.collaboration):
            await client.aclose()
