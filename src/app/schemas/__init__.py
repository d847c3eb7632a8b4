from .auth_schemas import TokenRefreshRequest, TokenResponse, UserResponse
from .common_schemas import OperationResult, PageResponse
from .menu_schemas import (
    HierarchicalMenuSchema,
    MenuCreate,
    MenuCreatedResponse,
    MenuSchema,
    MenuTreeNodeSchema,
    MenuUpdate,
)
from .role_schemas import MenuRoleSchema, RoleCreate, RoleSchema, RoleUpdate, UserRoleSchema
from .ui_element_schemas import (
    ElementWithPermissionSchema,
    GrantSchema,
    ReplaceGrantsRequest,
    UIElementCreate,
    UIElementSchema,
    UIElementUpdate,
)
from .user_schemas import ChangePasswordRequest, UserCreate, UserSchema, UserUpdate

__all__ = [
    "ChangePasswordRequest",
    "ElementWithPermissionSchema",
    "GrantSchema",
    "HierarchicalMenuSchema",
    "MenuCreate",
    "MenuCreatedResponse",
    "MenuRoleSchema",
    "MenuSchema",
    "MenuTreeNodeSchema",
    "MenuUpdate",
    "OperationResult",
    "PageResponse",
    "ReplaceGrantsRequest",
    "RoleCreate",
    "RoleSchema",
    "RoleUpdate",
    "TokenRefreshRequest",
    "TokenResponse",
    "UIElementCreate",
    "UIElementSchema",
    "UIElementUpdate",
    "UserCreate",
    "UserResponse",
    "UserRoleSchema",
    "UserSchema",
    "UserUpdate",
]
