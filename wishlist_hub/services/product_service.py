from sqlmodel import Session

from wishlist_hub.core.errors import NotFoundError
from wishlist_hub.models.product import Product
from wishlist_hub.repositories.product_repo import ProductRepository
from wishlist_hub.schemas.product import ProductPage, ProductRead

DEFAULT_LIST_LIMIT = 50
DEFAULT_SEARCH_LIMIT = 20


class ProductService:
    """
    Business logic for the read-only catalog.

    Responsibilities:
      - listing with category / text filters
      - advanced search (price range, minimum rating, relevance order)
      - lookups by id and by id set
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    def list_products(
        self,
        session: Session,
        *,
        category: str | None = None,
        search: str | None = None,
        limit: int = DEFAULT_LIST_LIMIT,
        offset: int = 0,
    ) -> ProductPage:
        """
        Plain listing. `search` matches title and description.
        """
        products, total = self.repo.search(
            session,
            text=search,
            category=category,
            skip=offset,
            limit=limit,
        )
        return ProductPage(
            products=[ProductRead.model_validate(p, from_attributes=True) for p in products],
            total=total,
            limit=limit,
            offset=offset,
        )

    def search_products(
        self,
        session: Session,
        *,
        q: str | None = None,
        category: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        min_rating: float | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
        offset: int = 0,
    ) -> ProductPage:
        """
        Advanced search.

        - `q` also matches the retailer name.
        - Results are ordered by rating, best first.
        - The applied filters are echoed back under `query`.
        """
        products, total = self.repo.search(
            session,
            text=q,
            text_fields=("title", "description", "retailer"),
            category=category,
            min_price=min_price,
            max_price=max_price,
            min_rating=min_rating,
            order_by_rating=True,
            skip=offset,
            limit=limit,
        )
        query = {
            "q": q,
            "category": category,
            "minPrice": min_price,
            "maxPrice": max_price,
            "rating": min_rating,
        }
        return ProductPage(
            products=[ProductRead.model_validate(p, from_attributes=True) for p in products],
            total=total,
            limit=limit,
            offset=offset,
            query={k: v for k, v in query.items() if v is not None},
        )

    def get_product(self, session: Session, product_id: int) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def get_products(self, session: Session, product_ids: list[int]) -> list[Product]:
        """Bulk lookup; unknown ids are omitted."""
        return self.repo.list_by_ids(session, product_ids)

    def list_categories(self, session: Session) -> list[str]:
        return self.repo.list_categories(session)
