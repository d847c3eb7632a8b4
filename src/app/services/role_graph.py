"""
Role management and the two role relations (role <-> menu, role <-> user).

Assign and remove are idempotent: asserting a link that already exists, or
removing one that is already gone, succeeds without touching the store.
"""

import logging

from app.config import Settings, get_settings
from app.errors import ConflictError, NotFoundError
from app.models import Menu, Role, User
from app.repositories.ports import (
    MenuPort,
    MenuRolePort,
    MenuRoleView,
    RolePort,
    TransactionScope,
    UserPort,
    UserRolePort,
    UserRoleView,
)
from app.schemas.role_schemas import RoleCreate, RoleUpdate
from app.utils.helpers import utc_now
from app.utils.pagination import Page, PageRequest, SortSpec, paginate_sequence

logger = logging.getLogger(__name__)

_ROLE_SEARCHABLE = {
    "role_name": lambda role: role.role_name,
    "role_comment": lambda role: role.role_comment,
}


class RoleGraphService:
    def __init__(
        self,
        roles: RolePort,
        menus: MenuPort,
        users: UserPort,
        menu_roles: MenuRolePort,
        user_roles: UserRolePort,
        tx: TransactionScope,
        settings: Settings | None = None,
    ):
        self.roles = roles
        self.menus = menus
        self.users = users
        self.menu_roles = menu_roles
        self.user_roles = user_roles
        self.tx = tx
        self.settings = settings or get_settings()

    def _page_request(self, request: PageRequest) -> PageRequest:
        return request.normalized(self.settings.max_page_size)

    def _require_role(self, role_id: int) -> Role:
        role = self.roles.get_by_id(role_id)
        if role is None:
            logger.warning("Role %s not found", role_id)
            raise NotFoundError("Role", role_id)
        return role

    def _require_menu(self, menu_id: int) -> Menu:
        menu = self.menus.get_by_id(menu_id)
        if menu is None:
            logger.warning("Menu %s not found", menu_id)
            raise NotFoundError("Menu", menu_id)
        return menu

    def _require_user(self, user_id: int) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            logger.warning("User %s not found", user_id)
            raise NotFoundError("User", user_id)
        return user

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def create_role(self, data: RoleCreate) -> int:
        role_name = data.role_name.strip()
        if self.roles.get_by_name(role_name) is not None:
            raise ConflictError(f"role {role_name!r} already exists")
        now = utc_now()
        role_id = self.roles.insert(
            Role(role_name=role_name, role_comment=data.role_comment, created_at=now, updated_at=now)
        )
        logger.info("Created role %s (%s)", role_id, role_name)
        return role_id

    def update_role(self, role_id: int, data: RoleUpdate) -> bool:
        role = self._require_role(role_id)
        if data.role_name is not None:
            role_name = data.role_name.strip()
            other = self.roles.get_by_name(role_name)
            if other is not None and other.id != role_id:
                raise ConflictError(f"role {role_name!r} already exists")
            role.role_name = role_name
        if data.role_comment is not None:
            role.role_comment = data.role_comment
        role.updated_at = utc_now()
        updated = self.roles.update(role)
        logger.info("Updated role %s", role_id)
        return updated

    def get_role(self, role_id: int) -> Role:
        return self._require_role(role_id)

    def get_role_by_name(self, role_name: str) -> Role | None:
        return self.roles.get_by_name(role_name)

    def list_roles(self) -> list[Role]:
        return self.roles.get_all()

    def get_roles_page(self, request: PageRequest, sort: SortSpec | None = None) -> Page[Role]:
        return self.roles.get_page(self._page_request(request), sort)

    def delete_role(self, role_id: int) -> bool:
        """Remove the role together with all of its user and menu links, atomically."""
        if self.roles.get_by_id(role_id) is None:
            logger.debug("Role %s not found, nothing to delete", role_id)
            return False
        with self.tx.transaction():
            users_removed = self.user_roles.delete_all_for_role(role_id)
            menus_removed = self.menu_roles.delete_all_for_role(role_id)
            self.roles.delete(role_id)
        logger.info(
            "Deleted role %s (%d user link(s), %d menu link(s))", role_id, users_removed, menus_removed
        )
        return True

    # ------------------------------------------------------------------
    # Role <-> menu
    # ------------------------------------------------------------------

    def assign_role_to_menu(self, menu_id: int, role_id: int) -> bool:
        self._require_menu(menu_id)
        self._require_role(role_id)
        if self.menu_roles.exists(menu_id, role_id):
            logger.debug("Menu %s already has role %s", menu_id, role_id)
            return True
        self.menu_roles.insert(menu_id, role_id)
        logger.info("Assigned role %s to menu %s", role_id, menu_id)
        return True

    def remove_role_from_menu(self, menu_id: int, role_id: int) -> bool:
        if self.menu_roles.delete(menu_id, role_id):
            logger.info("Removed role %s from menu %s", role_id, menu_id)
        else:
            logger.debug("Menu %s did not have role %s", menu_id, role_id)
        return True

    def menu_has_role(self, menu_id: int, role_id: int) -> bool:
        return self.menu_roles.exists(menu_id, role_id)

    def get_menus_for_role(self, role_id: int) -> list[Menu]:
        return self.menu_roles.menus_for_role(role_id)

    def get_roles_for_menu(self, menu_id: int) -> list[Role]:
        return self.menu_roles.roles_for_menu(menu_id)

    def get_menu_links_for_menu(self, menu_id: int) -> list[MenuRoleView]:
        return self.menu_roles.list_for_menu(menu_id)

    def get_menu_links_for_role(self, role_id: int) -> list[MenuRoleView]:
        return self.menu_roles.list_for_role(role_id)

    # ------------------------------------------------------------------
    # Role <-> user
    # ------------------------------------------------------------------

    def assign_role_to_user(self, user_id: int, role_id: int) -> bool:
        self._require_user(user_id)
        self._require_role(role_id)
        if self.user_roles.exists(user_id, role_id):
            logger.debug("User %s already has role %s", user_id, role_id)
            return True
        self.user_roles.insert(user_id, role_id)
        logger.info("Assigned role %s to user %s", role_id, user_id)
        return True

    def remove_role_from_user(self, user_id: int, role_id: int) -> bool:
        if self.user_roles.delete(user_id, role_id):
            logger.info("Removed role %s from user %s", role_id, user_id)
        else:
            logger.debug("User %s did not have role %s", user_id, role_id)
        return True

    def user_has_role(self, user_id: int, role_id: int) -> bool:
        return self.user_roles.exists(user_id, role_id)

    def user_has_role_named(self, user_id: int, role_name: str) -> bool:
        wanted = (role_name or "").strip().lower()
        return any(role.role_name.lower() == wanted for role in self.user_roles.roles_for_user(user_id))

    def get_users_for_role(self, role_id: int) -> list[User]:
        return self.user_roles.users_for_role(role_id)

    def get_roles_for_user(self, user_id: int) -> list[Role]:
        return self.user_roles.roles_for_user(user_id)

    def get_user_links_for_user(self, user_id: int) -> list[UserRoleView]:
        return self.user_roles.list_for_user(user_id)

    def get_user_links_for_role(self, role_id: int) -> list[UserRoleView]:
        return self.user_roles.list_for_role(role_id)

    # ------------------------------------------------------------------
    # Paged variants
    # ------------------------------------------------------------------

    def get_menus_for_role_page(self, role_id: int, request: PageRequest) -> Page[Menu]:
        return self.menu_roles.menus_for_role_page(role_id, self._page_request(request))

    def get_users_for_role_page(self, role_id: int, request: PageRequest) -> Page[User]:
        return self.user_roles.users_for_role_page(role_id, self._page_request(request))

    def get_roles_for_menu_page(self, menu_id: int, request: PageRequest) -> Page[Role]:
        return paginate_sequence(
            self.menu_roles.roles_for_menu(menu_id),
            self._page_request(request),
            searchable=_ROLE_SEARCHABLE,
            id_getter=lambda role: role.id,
            default_sort=lambda role: role.role_name,
        )

    def get_roles_for_user_page(self, user_id: int, request: PageRequest) -> Page[Role]:
        return paginate_sequence(
            self.user_roles.roles_for_user(user_id),
            self._page_request(request),
            searchable=_ROLE_SEARCHABLE,
            id_getter=lambda role: role.id,
            default_sort=lambda role: role.role_name,
        )

    def get_menu_roles_page(self, request: PageRequest) -> Page[MenuRoleView]:
        return self.menu_roles.get_page(self._page_request(request))

    def get_user_roles_page(
        self, request: PageRequest, user_id: int | None = None, role_id: int | None = None
    ) -> Page[UserRoleView]:
        return self.user_roles.get_page(self._page_request(request), user_id=user_id, role_id=role_id)
