"""
Router for role administration and the role -> menu / role -> user lookups.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.dependencies.authz import require_admin
from app.dependencies.pagination import get_page_request, get_sort_spec
from app.dependencies.services import get_role_graph_service
from app.schemas.common_schemas import PageResponse
from app.schemas.menu_schemas import MenuSchema
from app.schemas.role_schemas import MenuRoleSchema, RoleCreate, RoleSchema, RoleUpdate, UserRoleSchema
from app.schemas.user_schemas import UserSchema
from app.services.role_graph import RoleGraphService
from app.utils.pagination import PageRequest, SortSpec

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/roles", tags=["RBAC_Management"], dependencies=[Depends(require_admin)])

# Module-level dependency objects to avoid calling Depends() in function defaults
role_graph_dependency = Depends(get_role_graph_service)
page_request_dependency = Depends(get_page_request)
sort_dependency = Depends(get_sort_spec)


@router.get("", response_model=PageResponse[RoleSchema], summary="Search roles (paged)")
def get_roles_page(
    request: PageRequest = page_request_dependency,
    sort: SortSpec | None = sort_dependency,
    role_graph: RoleGraphService = role_graph_dependency,
):
    page = role_graph.get_roles_page(request, sort)
    return PageResponse.from_page(page, [RoleSchema.model_validate(role) for role in page.items])


@router.get("/all", response_model=list[RoleSchema])
def list_roles(role_graph: RoleGraphService = role_graph_dependency):
    return role_graph.list_roles()


@router.post("", response_model=RoleSchema, status_code=status.HTTP_201_CREATED, summary="Create a role")
def create_role(payload: RoleCreate, role_graph: RoleGraphService = role_graph_dependency):
    role_id = role_graph.create_role(payload)
    return role_graph.get_role(role_id)


@router.get("/{role_id}", response_model=RoleSchema)
def get_role(role_id: int, role_graph: RoleGraphService = role_graph_dependency):
    return role_graph.get_role(role_id)


@router.put("/{role_id}", response_model=RoleSchema, summary="Update a role")
def update_role(role_id: int, payload: RoleUpdate, role_graph: RoleGraphService = role_graph_dependency):
    role_graph.update_role(role_id, payload)
    return role_graph.get_role(role_id)


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a role",
    description="Removes the role together with all of its user and menu assignments in one transaction.",
)
def delete_role(role_id: int, role_graph: RoleGraphService = role_graph_dependency):
    if not role_graph.delete_role(role_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Role {role_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{role_id}/menus", response_model=list[MenuSchema])
def get_menus_for_role(role_id: int, role_graph: RoleGraphService = role_graph_dependency):
    return role_graph.get_menus_for_role(role_id)


@router.get("/{role_id}/menus/page", response_model=PageResponse[MenuSchema])
def get_menus_for_role_page(
    role_id: int,
    request: PageRequest = page_request_dependency,
    role_graph: RoleGraphService = role_graph_dependency,
):
    page = role_graph.get_menus_for_role_page(role_id, request)
    return PageResponse.from_page(page, [MenuSchema.model_validate(menu) for menu in page.items])


@router.get("/{role_id}/menu-links", response_model=list[MenuRoleSchema])
def get_menu_links_for_role(role_id: int, role_graph: RoleGraphService = role_graph_dependency):
    return [MenuRoleSchema.model_validate(view) for view in role_graph.get_menu_links_for_role(role_id)]


@router.get("/{role_id}/users", response_model=list[UserSchema])
def get_users_for_role(role_id: int, role_graph: RoleGraphService = role_graph_dependency):
    return role_graph.get_users_for_role(role_id)


@router.get("/{role_id}/users/page", response_model=PageResponse[UserSchema])
def get_users_for_role_page(
    role_id: int,
    request: PageRequest = page_request_dependency,
    role_graph: RoleGraphService = role_graph_dependency,
):
    page = role_graph.get_users_for_role_page(role_id, request)
    return PageResponse.from_page(page, [UserSchema.model_validate(user) for user in page.items])


@router.get("/{role_id}/user-links", response_model=list[UserRoleSchema])
def get_user_links_for_role(role_id: int, role_graph: RoleGraphService = role_graph_dependency):
    return [UserRoleSchema.model_validate(view) for view in role_graph.get_user_links_for_role(role_id)]
