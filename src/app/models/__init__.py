from .menu import Menu
from .rbac import MenuRole, Role, UserRole
from .ui_element import UIElement, UIElementUserPermission
from .user import User

__all__ = [
    "Menu",
    "MenuRole",
    "Role",
    "UIElement",
    "UIElementUserPermission",
    "User",
    "UserRole",
]
