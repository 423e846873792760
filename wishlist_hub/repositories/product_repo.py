from sqlalchemy import func, or_
from sqlmodel import Session, col, select

from wishlist_hub.models.product import Product


class ProductRepository:
    """
    Data access layer for the catalog.

    - Pure DB operations (queries only; the catalog is read-only).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: int) -> Product | None:
        return session.get(Product, product_id)

    def list_by_ids(self, session: Session, product_ids: list[int]) -> list[Product]:
        if not product_ids:
            return []
        stmt = select(Product).where(col(Product.id).in_(product_ids)).order_by(Product.id)
        return session.exec(stmt).all()

    def search(
        self,
        session: Session,
        *,
        text: str | None = None,
        text_fields: tuple[str, ...] = ("title", "description"),
        category: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        min_rating: float | None = None,
        order_by_rating: bool = False,
        skip: int = 0,
        limit: int = 50,
    ) -> tuple[list[Product], int]:
        """
        Filtered, paginated product query.

        Args:
            text: case-insensitive substring matched against `text_fields`
            category: case-insensitive exact category match
            min_price / max_price / min_rating: inclusive bounds
            order_by_rating: sort by rating descending (else by id)

        Returns:
            (page of products, total number of matches before paging)
        """
        stmt = select(Product)

        if text:
            pattern = f"%{text.lower()}%"
            stmt = stmt.where(
                or_(*[func.lower(getattr(Product, field)).like(pattern) for field in text_fields])
            )
        if category:
            stmt = stmt.where(func.lower(Product.category) == category.lower())
        if min_price is not None:
            stmt = stmt.where(Product.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(Product.price <= max_price)
        if min_rating is not None:
            stmt = stmt.where(Product.rating >= min_rating)

        total = session.exec(select(func.count()).select_from(stmt.subquery())).one()

        if order_by_rating:
            stmt = stmt.order_by(col(Product.rating).desc(), Product.id)
        else:
            stmt = stmt.order_by(Product.id)

        stmt = stmt.offset(skip).limit(limit)
        return session.exec(stmt).all(), total

    def list_categories(self, session: Session) -> list[str]:
        stmt = select(Product.category).distinct().order_by(Product.category)
        return session.exec(stmt).all()

    def count(self, session: Session) -> int:
        return session.exec(select(func.count()).select_from(Product)).one()
