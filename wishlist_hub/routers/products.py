from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from wishlist_hub.core.query import parse_ids
from wishlist_hub.database import get_session
from wishlist_hub.repositories.product_repo import ProductRepository
from wishlist_hub.schemas.product import ProductPage, ProductRead
from wishlist_hub.services.product_service import (
    DEFAULT_LIST_LIMIT,
    DEFAULT_SEARCH_LIMIT,
    ProductService,
)

router = APIRouter(tags=["Catalog"])

repo = ProductRepository()
service = ProductService(repo)


@router.get("/products", response_model=ProductPage)
def list_products(
    category: str | None = None,
    search: str | None = None,
    limit: int = Query(default=DEFAULT_LIST_LIMIT, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    session: Session = Depends(get_session),
):
    """
    List products.

    - `category`: case-insensitive exact match
    - `search`: substring of title or description
    """
    return service.list_products(
        session, category=category, search=search, limit=limit, offset=offset
    )


@router.get("/products/search", response_model=ProductPage)
def search_products(
    q: str | None = None,
    category: str | None = None,
    min_price: float | None = Query(default=None, alias="minPrice", ge=0),
    max_price: float | None = Query(default=None, alias="maxPrice", ge=0),
    rating: float | None = Query(default=None, ge=0, le=5),
    limit: int = Query(default=DEFAULT_SEARCH_LIMIT, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    session: Session = Depends(get_session),
):
    """
    Advanced search: text, category, price range and minimum rating.
    Best-rated first.
    """
    return service.search_products(
        session,
        q=q,
        category=category,
        min_price=min_price,
        max_price=max_price,
        min_rating=rating,
        limit=limit,
        offset=offset,
    )


@router.get("/products/byIds", response_model=list[ProductRead])
def get_products_by_ids(
    ids: str | None = Query(default=None, description="Comma-separated product ids"),
    session: Session = Depends(get_session),
):
    """
    Bulk lookup used for enrichment. Unknown ids are omitted.
    """
    return service.get_products(session, parse_ids(ids))


@router.get("/products/{product_id}", response_model=ProductRead)
def get_product(
    product_id: int,
    session: Session = Depends(get_session),
):
    return service.get_product(session, product_id)


@router.get("/categories", response_model=list[str])
def list_categories(session: Session = Depends(get_session)):
    """
    Distinct category names, sorted.
    """
    return service.list_categories(session)
