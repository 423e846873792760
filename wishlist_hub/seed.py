"""
Demo data for the identity and catalog services.

Rows are only inserted into empty tables, so restarting a service never
duplicates or overwrites anything.
"""

import json
import logging
from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import Session

from wishlist_hub.models.product import Product
from wishlist_hub.models.user import User
from wishlist_hub.repositories.product_repo import ProductRepository
from wishlist_hub.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"


def _load(name: str) -> list[dict]:
    with open(DATA_DIR / name, encoding="utf-8") as fh:
        return json.load(fh)


def seed_users(engine: Engine) -> int:
    """Insert demo users if the users table is empty. Returns rows inserted."""
    repo = UserRepository()
    with Session(engine) as session:
        if repo.count(session):
            return 0
        rows = _load("users.json")
        for row in rows:
            session.add(User(**row))
        session.commit()
    logger.info("Seeded %d demo users", len(rows))
    return len(rows)


def seed_products(engine: Engine) -> int:
    """Insert the demo catalog if the products table is empty."""
    repo = ProductRepository()
    with Session(engine) as session:
        if repo.count(session):
            return 0
        rows = _load("products.json")
        for row in rows:
            session.add(Product(**row))
        session.commit()
    logger.info("Seeded %d catalog products", len(rows))
    return len(rows)
