from sqlmodel import Session

from wishlist_hub.core.auth import Principal, create_access_token
from wishlist_hub.core.config import Settings
from wishlist_hub.core.errors import NotFoundError, ValidationError
from wishlist_hub.models.user import User
from wishlist_hub.repositories.user_repo import UserRepository
from wishlist_hub.schemas.user import LoginRequest, TokenResponse


class UserService:
    """
    Business logic for the identity service.

    Responsibilities:
      - development login (username -> signed bearer token)
      - profile lookups, single and batched
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def login(self, session: Session, settings: Settings, payload: LoginRequest) -> TokenResponse:
        """
        Exchange a known username for a bearer token.

        Raises:
            ValidationError: unknown username.
        """
        user = self.repo.get_by_username(session, payload.user)
        if not user:
            raise ValidationError("unknown user")

        token = create_access_token(settings, user.id, user.public_name)
        return TokenResponse(access_token=token)

    def get_me(self, session: Session, principal: Principal) -> User:
        """
        Return the caller's own profile.

        The token may outlive the user row, hence the 404.
        """
        return self.get_user(session, principal.id)

    def get_user(self, session: Session, user_id: int) -> User:
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise NotFoundError("user not found")
        return user

    def list_users(self, session: Session, user_ids: list[int]) -> list[User]:
        """Bulk lookup; unknown ids are omitted."""
        return self.repo.list_by_ids(session, user_ids)
