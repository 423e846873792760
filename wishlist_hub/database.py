from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from wishlist_hub.core.config import Settings

# Import models so SQLModel metadata is populated before create_all()
from wishlist_hub.models import user as _user_models  # noqa: F401
from wishlist_hub.models import product as _product_models  # noqa: F401
from wishlist_hub.models import wishlist as _wishlist_models  # noqa: F401
from wishlist_hub.models import access as _access_models  # noqa: F401


def build_engine(settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine for a leaf service.

    - pool_pre_ping=True: validate pooled connections before use
    - SQLite: allow the connection to be used from FastAPI's worker threads
    """
    connect_args: dict = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        settings.DATABASE_URL,
        echo=settings.SQL_ECHO,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def create_db_and_tables(engine: Engine) -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    Called once on leaf-service startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session(request: Request):
    """
    FastAPI dependency that yields a SQLModel Session bound to the engine of
    the app serving the request.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(request.app.state.engine) as session:
        yield session
