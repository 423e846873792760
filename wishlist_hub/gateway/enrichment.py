"""
Enrichment pipeline.

Primary records (wishlists, items, grants) are fetched from their owning
store and decorated with entities owned by another store: owners and
collaborators from identity, products from the catalog.

Enrichment is best-effort. A lookup that fails or finds nothing is replaced
by a placeholder carrying the known id, so a response is never lost
because a secondary service is down.
"""

import asyncio
import logging
from typing import Any, Callable

from wishlist_hub.core.errors import AppError
from wishlist_hub.gateway.clients import Lookup, ServiceClients

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown User"
UNKNOWN_WISHLIST = "Unknown Wishlist"
PRODUCT_NOT_FOUND = "Product not found"

Record = dict[str, Any]


# ----- Placeholders -----


def user_placeholder(user_id: int, display_name: str | None = None) -> Record:
    return {"id": user_id, "public_name": display_name or UNKNOWN_USER, "icon_url": None}


def product_placeholder(product_id: int) -> Record:
    return {"id": product_id, "title": PRODUCT_NOT_FOUND}


def wishlist_placeholder(wishlist_id: int) -> Record:
    return {"id": wishlist_id, "name": UNKNOWN_WISHLIST}


# ----- Primitives -----


async def attach_one(lookup: Lookup, key: Any, placeholder: Callable[[Any], Record]) -> Record:
    """
    Fetch one entity, or its placeholder. Never raises an AppError.
    """
    try:
        entity = await lookup.get(key)
    except AppError as exc:
        logger.warning("Lookup of %r failed, using placeholder: %s", key, exc.message)
        return placeholder(key)
    if entity is None:
        return placeholder(key)
    return entity


async def attach_many(
    records: list[Record],
    lookup: Lookup,
    key_field: str,
    target_field: str,
    placeholder: Callable[[Record], Record],
    batched: bool = True,
) -> list[Record]:
    """
    Return copies of `records`, each with `target_field` set to the entity
    whose id is `record[key_field]`.

    batched=True issues one `get_many` for the distinct ids; if it fails
    every record gets its placeholder. batched=False issues one `get` per
    record concurrently and replaces failures independently.

    `placeholder` receives the record, so callers can build it from other
    fields (e.g. a grant's display name). Output order equals input order.
    """
    if not records:
        return []

    keys = [record[key_field] for record in records]

    if batched:
        distinct = list(dict.fromkeys(keys))
        try:
            found = await lookup.get_many(distinct)
        except AppError as exc:
            logger.warning(
                "Batch lookup of %d ids failed, using placeholders: %s", len(distinct), exc.message
            )
            found = []
        by_id = {entity["id"]: entity for entity in found}
        values = [
            by_id[key] if key in by_id else placeholder(record)
            for key, record in zip(keys, records)
        ]
    else:
        values = await asyncio.gather(
            *(
                attach_one(lookup, key, lambda _key, record=record: placeholder(record))
                for key, record in zip(keys, records)
            )
        )

    return [{**record, target_field: value} for record, value in zip(records, values)]


# ----- Compositions -----


def _owner_placeholder(wishlist: Record) -> Record:
    return user_placeholder(wishlist["owner_id"])


def _product_placeholder(item: Record) -> Record:
    return product_placeholder(item["product_id"])


def _collaborator_placeholder(grant: Record) -> Record:
    return user_placeholder(grant["user_id"], grant.get("display_name"))


async def enrich_items(clients: ServiceClients, items: list[Record]) -> list[Record]:
    return await attach_many(items, clients.catalog, "product_id", "product", _product_placeholder)


async def load_enriched_items(clients: ServiceClients, wishlist_id: int) -> list[Record]:
    items = await clients.wishlists.list_items(wishlist_id)
    return await enrich_items(clients, items)


async def wishlist_detail(clients: ServiceClients, wishlist: Record, role: str) -> Record:
    """
    Wishlist with `owner`, the caller's `role` and product-enriched `items`.

    The owner lookup and the items branch run concurrently. A failing items
    fetch propagates; a failing owner or product lookup degrades.
    """
    owner, items = await asyncio.gather(
        attach_one(clients.identity, wishlist["owner_id"], user_placeholder),
        load_enriched_items(clients, wishlist["id"]),
    )
    return {**wishlist, "owner": owner, "role": role, "items": items}


async def owned_wishlists(clients: ServiceClients, user_id: int) -> list[Record]:
    wishlists = await clients.wishlists.list_for_owner(user_id)
    return await attach_many(wishlists, clients.identity, "owner_id", "owner", _owner_placeholder)


async def shared_wishlists(clients: ServiceClients, user_id: int) -> list[Record]:
    """
    Lists shared with `user_id`, each with the caller's role and the owner.

    Grants whose wishlist no longer exists are dropped.
    """
    grants = await clients.collaboration.list_for_user(user_id)
    if not grants:
        return []

    wishlists = await clients.wishlists.get_many(grant["wishlist_id"] for grant in grants)
    by_id = {wishlist["id"]: wishlist for wishlist in wishlists}

    shared = [
        {**by_id[grant["wishlist_id"]], "role": grant["role"]}
        for grant in grants
        if grant["wishlist_id"] in by_id
    ]
    return await attach_many(shared, clients.identity, "owner_id", "owner", _owner_placeholder)


async def collaborators(clients: ServiceClients, wishlist_id: int) -> list[Record]:
    grants = await clients.collaboration.list_for_wishlist(wishlist_id)
    return await attach_many(grants, clients.identity, "user_id", "user", _collaborator_placeholder)


async def wishlist_summary(clients: ServiceClients, wishlist_id: int) -> Record:
    """The wishlist, or a placeholder without `owner_id` when unavailable."""
    return await attach_one(clients.wishlists, wishlist_id, wishlist_placeholder)


async def product_title(clients: ServiceClients, product_id: int) -> str | None:
    """Catalog title for an item snapshot; None when unavailable."""
    product = await attach_one(clients.catalog, product_id, lambda _id: {})
    return product.get("title")
