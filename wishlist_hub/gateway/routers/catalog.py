from fastapi import APIRouter, Depends, Query

from wishlist_hub.core.query import parse_ids
from wishlist_hub.gateway.clients import ServiceClients
from wishlist_hub.gateway.deps import get_clients
from wishlist_hub.schemas.product import ProductPage, ProductRead
from wishlist_hub.services.product_service import DEFAULT_LIST_LIMIT, DEFAULT_SEARCH_LIMIT

# Public: no bearer dependency anywhere in this router.
router = APIRouter(tags=["Catalog"])


def _present(params: dict) -> dict:
    return {key: value for key, value in params.items() if value is not None}


@router.get("/products", response_model=ProductPage)
async def list_products(
    category: str | None = None,
    search: str | None = None,
    limit: int = Query(default=DEFAULT_LIST_LIMIT, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    clients: ServiceClients = Depends(get_clients),
):
    params = {"category": category, "search": search, "limit": limit, "offset": offset}
    return await clients.catalog.list_products(_present(params))


@router.get("/products/search", response_model=ProductPage)
async def search_products(
    q: str | None = None,
    category: str | None = None,
    min_price: float | None = Query(default=None, alias="minPrice", ge=0),
    max_price: float | None = Query(default=None, alias="maxPrice", ge=0),
    rating: float | None = Query(default=None, ge=0, le=5),
    limit: int = Query(default=DEFAULT_SEARCH_LIMIT, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    clients: ServiceClients = Depends(get_clients),
):
    params = {
        "q": q,
        "category": category,
        "minPrice": min_price,
        "maxPrice": max_price,
        "rating": rating,
        "limit": limit,
        "offset": offset,
    }
    return await clients.catalog.search_products(_present(params))


@router.get("/products/byIds", response_model=list[ProductRead])
async def get_products_by_ids(
    ids: str | None = None,
    clients: ServiceClients = Depends(get_clients),
):
    return await clients.catalog.get_many(parse_ids(ids))


@router.get("/products/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: int,
    clients: ServiceClients = Depends(get_clients),
):
    return await clients.catalog.get_product(product_id)


@router.get("/categories", response_model=list[str])
async def list_categories(clients: ServiceClients = Depends(get_clients)):
    return await clients.catalog.list_categories()
