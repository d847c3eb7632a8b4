from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.db import get_db
from app.services.factory import (
    build_menu_tree_service,
    build_permission_service,
    build_role_graph_service,
    build_user_service,
)
from app.services.menu_tree import MenuTreeService
from app.services.permissions import PermissionService
from app.services.role_graph import RoleGraphService
from app.services.users import UserService

# Module-level dependency objects to avoid calling Depends() in function defaults
db_dependency = Depends(get_db)
settings_dependency = Depends(get_settings)


def get_menu_tree_service(db: Session = db_dependency, settings: Settings = settings_dependency) -> MenuTreeService:
    return build_menu_tree_service(db, settings)


def get_role_graph_service(db: Session = db_dependency, settings: Settings = settings_dependency) -> RoleGraphService:
    return build_role_graph_service(db, settings)


def get_permission_service(db: Session = db_dependency, settings: Settings = settings_dependency) -> PermissionService:
    return build_permission_service(db, settings)


def get_user_service(db: Session = db_dependency, settings: Settings = settings_dependency) -> UserService:
    return build_user_service(db, settings)
