from . import (  # noqa: F401
    auth,
    health,
    menu_access,
    menus,
    rbac,
    roles,
    ui_elements,
    users,
)
