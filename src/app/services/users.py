import logging
from datetime import datetime

from app.config import Settings, get_settings
from app.errors import ConflictError, NotFoundError
from app.models import User
from app.repositories.ports import ElementPermissionPort, TransactionScope, UserPort, UserRolePort
from app.schemas.user_schemas import UserCreate, UserUpdate
from app.utils.auth import hash_password, verify_password
from app.utils.helpers import utc_now
from app.utils.pagination import Page, PageRequest, SortSpec

logger = logging.getLogger(__name__)


class UserService:
    """User accounts. Role membership lives in ``RoleGraphService``."""

    def __init__(
        self,
        users: UserPort,
        user_roles: UserRolePort,
        grants: ElementPermissionPort,
        tx: TransactionScope,
        settings: Settings | None = None,
    ):
        self.users = users
        self.user_roles = user_roles
        self.grants = grants
        self.tx = tx
        self.settings = settings or get_settings()

    def create_user(self, data: UserCreate) -> int:
        user_name = data.user_name.strip()
        if self.users.get_by_user_name(user_name) is not None:
            raise ConflictError(f"user {user_name!r} already exists")
        now = utc_now()
        user = User(
            user_name=user_name,
            password=hash_password(data.password),
            name=data.name,
            email=data.email,
            created_at=now,
            updated_at=now,
        )
        user_id = self.users.insert(user)
        logger.info("Created user %s (%s)", user_id, user_name)
        return user_id

    def update_user(self, user_id: int, data: UserUpdate) -> bool:
        user = self.get_user(user_id)
        if data.name is not None:
            user.name = data.name
        if data.email is not None:
            user.email = data.email
        user.updated_at = utc_now()
        return self.users.update(user)

    def change_password(self, user_id: int, new_password: str) -> bool:
        user = self.get_user(user_id)
        user.password = hash_password(new_password)
        # outstanding refresh tokens stop working
        user.refresh_token = None
        user.refresh_token_expiry = None
        user.updated_at = utc_now()
        self.users.update(user)
        logger.info("Password changed for user %s", user_id)
        return True

    def get_user(self, user_id: int) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def get_user_by_name(self, user_name: str) -> User | None:
        return self.users.get_by_user_name(user_name)

    def list_users(self) -> list[User]:
        return self.users.get_all()

    def get_users_page(self, request: PageRequest, sort: SortSpec | None = None) -> Page[User]:
        return self.users.get_page(request.normalized(self.settings.max_page_size), sort)

    def delete_user(self, user_id: int) -> bool:
        """Remove the user along with its role memberships and element grants."""
        if self.users.get_by_id(user_id) is None:
            logger.debug("User %s not found, nothing to delete", user_id)
            return False
        with self.tx.transaction():
            self.user_roles.delete_all_for_user(user_id)
            self.grants.delete_all_for_user(user_id)
            self.users.delete(user_id)
        logger.info("Deleted user %s", user_id)
        return True

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def authenticate(self, user_name: str, password: str) -> User | None:
        user = self.users.get_by_user_name(user_name)
        if user is None or not verify_password(password, user.password):
            logger.info("Failed login for %r", user_name)
            return None
        return user

    def store_refresh_token(self, user: User, token: str | None, expires_at: datetime | None) -> None:
        user.refresh_token = token
        user.refresh_token_expiry = expires_at
        self.users.update(user)
