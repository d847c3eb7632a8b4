"""
Menus visible to the signed-in user through the roles they hold.
"""

from fastapi import APIRouter, Depends

from app.dependencies.authz import get_current_user
from app.dependencies.services import get_menu_tree_service
from app.models.user import User as DBUser
from app.routers.menus import tree_to_schema
from app.schemas.menu_schemas import MenuSchema, MenuTreeNodeSchema
from app.services.menu_tree import MenuTreeService

router = APIRouter(prefix="/api/menus", tags=["Menu_Access"])

# Module-level dependency objects to avoid calling Depends() in function defaults
current_user_dependency = Depends(get_current_user)
menu_service_dependency = Depends(get_menu_tree_service)


@router.get("/mine", response_model=list[MenuSchema], summary="Menus granted to the current user")
def get_my_menus(
    user: DBUser = current_user_dependency,
    service: MenuTreeService = menu_service_dependency,
):
    return service.get_menus_for_user(user.id)


@router.get("/mine/tree", response_model=list[MenuTreeNodeSchema], summary="Menu tree of the current user")
def get_my_menu_tree(
    user: DBUser = current_user_dependency,
    service: MenuTreeService = menu_service_dependency,
):
    return [tree_to_schema(node) for node in service.get_menu_tree_for_user(user.id)]
