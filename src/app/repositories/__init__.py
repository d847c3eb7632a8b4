from .element_permission_repository import ElementPermissionRepository
from .menu_repository import MenuRepository
from .menu_role_repository import MenuRoleRepository
from .role_repository import RoleRepository
from .transaction import SqlAlchemyTransactionScope, TransactionHandle
from .ui_element_repository import UIElementRepository
from .user_repository import UserRepository
from .user_role_repository import UserRoleRepository

__all__ = [
    "ElementPermissionRepository",
    "MenuRepository",
    "MenuRoleRepository",
    "RoleRepository",
    "SqlAlchemyTransactionScope",
    "TransactionHandle",
    "UIElementRepository",
    "UserRepository",
    "UserRoleRepository",
]
