"""
Router for the raw role relations (menu <-> role and user <-> role rows).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.dependencies.authz import require_admin
from app.dependencies.pagination import get_page_request
from app.dependencies.services import get_role_graph_service
from app.schemas.common_schemas import PageResponse
from app.schemas.role_schemas import MenuRoleSchema, UserRoleSchema
from app.services.role_graph import RoleGraphService
from app.utils.pagination import PageRequest

router = APIRouter(prefix="/api/admin", tags=["RBAC_Management"], dependencies=[Depends(require_admin)])

# Module-level dependency objects to avoid calling Depends() in function defaults
role_graph_dependency = Depends(get_role_graph_service)
page_request_dependency = Depends(get_page_request)


@router.get(
    "/menu-roles",
    response_model=PageResponse[MenuRoleSchema],
    summary="Menu/role assignments (paged)",
    description="Searchable by menu_title, menu_key and role_name.",
)
def get_menu_roles_page(
    request: PageRequest = page_request_dependency,
    role_graph: RoleGraphService = role_graph_dependency,
):
    page = role_graph.get_menu_roles_page(request)
    return PageResponse.from_page(page, [MenuRoleSchema.model_validate(view) for view in page.items])


@router.get(
    "/user-roles",
    response_model=PageResponse[UserRoleSchema],
    summary="User/role memberships (paged)",
    description="Searchable by user_name and role_name; optionally restricted to one user or one role.",
)
def get_user_roles_page(
    user_id: Annotated[int | None, Query(description="Only rows of this user")] = None,
    role_id: Annotated[int | None, Query(description="Only rows of this role")] = None,
    request: PageRequest = page_request_dependency,
    role_graph: RoleGraphService = role_graph_dependency,
):
    page = role_graph.get_user_roles_page(request, user_id=user_id, role_id=role_id)
    return PageResponse.from_page(page, [UserRoleSchema.model_validate(view) for view in page.items])
