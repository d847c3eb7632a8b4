"""Wire services to the SQLAlchemy repositories of one session."""

from sqlalchemy.orm import Session

from app.config import Settings
from app.repositories import (
    ElementPermissionRepository,
    MenuRepository,
    MenuRoleRepository,
    RoleRepository,
    SqlAlchemyTransactionScope,
    UIElementRepository,
    UserRepository,
    UserRoleRepository,
)
from app.services.menu_tree import MenuTreeService
from app.services.permissions import PermissionService
from app.services.role_graph import RoleGraphService
from app.services.users import UserService


def build_menu_tree_service(session: Session, settings: Settings | None = None) -> MenuTreeService:
    return MenuTreeService(
        MenuRepository(session),
        MenuRoleRepository(session),
        SqlAlchemyTransactionScope(session),
        settings,
    )


def build_role_graph_service(session: Session, settings: Settings | None = None) -> RoleGraphService:
    return RoleGraphService(
        RoleRepository(session),
        MenuRepository(session),
        UserRepository(session),
        MenuRoleRepository(session),
        UserRoleRepository(session),
        SqlAlchemyTransactionScope(session),
        settings,
    )


def build_permission_service(session: Session, settings: Settings | None = None) -> PermissionService:
    return PermissionService(
        UIElementRepository(session),
        UserRepository(session),
        ElementPermissionRepository(session),
        SqlAlchemyTransactionScope(session),
        settings,
    )


def build_user_service(session: Session, settings: Settings | None = None) -> UserService:
    return UserService(
        UserRepository(session),
        UserRoleRepository(session),
        ElementPermissionRepository(session),
        SqlAlchemyTransactionScope(session),
        settings,
    )
