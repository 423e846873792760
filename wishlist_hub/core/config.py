from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

EditPolicyName = Literal["owner_or_editor", "owner_only"]
AcceptPolicyName = Literal["update", "reject"]


class Settings(BaseSettings):
    """
    Centralized settings shared by every service in the suite.

    Built once at process start (see `get_settings`) and handed to each app
    factory, HTTP client and service explicitly. Nothing else in the package
    reads the environment.

    Optional env vars (.env):
      - DATABASE_URL (defaults to a local SQLite file)
      - JWT_SECRET (HS256 signing secret shared by identity and gateway)
      - *_SERVICE_URL (where the gateway finds each leaf service)
      - EDIT_POLICY: owner_or_editor | owner_only
      - ACCEPT_POLICY: update | reject
    """

    PROJECT_NAME: str = "Wishlist Hub"
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Storage shared by the leaf services
    DATABASE_URL: str = "sqlite:///./wishlist_hub.db"
    SQL_ECHO: bool = False
    SEED_DEMO_DATA: bool = True

    # Bearer tokens
    JWT_SECRET: str = "dev_super_secret_change_me"
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    # Downstream services, as seen from the gateway
    IDENTITY_SERVICE_URL: str = "http://localhost:3001"
    WISHLIST_SERVICE_URL: str = "http://localhost:3002"
    COLLABORATION_SERVICE_URL: str = "http://localhost:3003"
    CATALOG_SERVICE_URL: str = "http://localhost:3004"
    UPSTREAM_TIMEOUT_SECONDS: float = 5.0

    # Invitations
    FRONTEND_BASE_URL: str = "http://localhost:5173"
    INVITE_TTL_HOURS: int = 168

    # Policies left open by the product; both variants are supported
    EDIT_POLICY: EditPolicyName = "owner_or_editor"
    ACCEPT_POLICY: AcceptPolicyName = "update"

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures the environment is parsed exactly once per process.
    """
    return Settings()
