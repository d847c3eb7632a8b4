"""
Router for menu tree administration.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.dependencies.authz import require_admin
from app.dependencies.pagination import get_page_request, get_sort_spec
from app.dependencies.services import get_menu_tree_service, get_role_graph_service
from app.schemas.common_schemas import OperationResult, PageResponse
from app.schemas.menu_schemas import (
    HierarchicalMenuSchema,
    MenuCreate,
    MenuCreatedResponse,
    MenuSchema,
    MenuTreeNodeSchema,
    MenuUpdate,
)
from app.schemas.role_schemas import RoleSchema
from app.services.menu_tree import HierarchicalMenu, MenuTreeService, TreeNode
from app.services.role_graph import RoleGraphService
from app.utils.pagination import PageRequest, SortSpec

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/menus", tags=["Menu_Management"], dependencies=[Depends(require_admin)])

# Module-level dependency objects to avoid calling Depends() in function defaults
menu_service_dependency = Depends(get_menu_tree_service)
role_graph_dependency = Depends(get_role_graph_service)
page_request_dependency = Depends(get_page_request)
sort_dependency = Depends(get_sort_spec)


def tree_to_schema(node: TreeNode) -> MenuTreeNodeSchema:
    return MenuTreeNodeSchema(
        **MenuSchema.model_validate(node.menu).model_dump(),
        children=[tree_to_schema(child) for child in node.children],
    )


def _hierarchical_schema(item: HierarchicalMenu) -> HierarchicalMenuSchema:
    return HierarchicalMenuSchema(
        **MenuSchema.model_validate(item.menu).model_dump(),
        path=item.path,
        depth=item.depth,
    )


@router.get("", response_model=PageResponse[MenuSchema], summary="Search menus (flat, paged)")
def get_menus_page(
    request: PageRequest = page_request_dependency,
    sort: SortSpec | None = sort_dependency,
    service: MenuTreeService = menu_service_dependency,
):
    page = service.get_menus_page(request, sort)
    return PageResponse.from_page(page, [MenuSchema.model_validate(menu) for menu in page.items])


@router.get("/all", response_model=list[MenuSchema], summary="All menus ordered by menu_order")
def get_all_menus(service: MenuTreeService = menu_service_dependency):
    return service.get_all_menus()


@router.get("/tree", response_model=list[MenuTreeNodeSchema], summary="Full menu tree")
def get_menu_tree(service: MenuTreeService = menu_service_dependency):
    return [tree_to_schema(node) for node in service.get_menu_tree()]


@router.get("/hierarchy", response_model=PageResponse[HierarchicalMenuSchema], summary="Hierarchical menu page")
def get_hierarchical_page(
    page: Annotated[int, Query(description="1-based page number")] = 1,
    page_size: Annotated[int | None, Query(description="Rows per page")] = None,
    search: Annotated[str | None, Query(description="Matches menu_key or title")] = None,
    sort: Annotated[str | None, Query(description="Column to sort by (default menu_order)")] = None,
    ascending: bool = True,
    service: MenuTreeService = menu_service_dependency,
):
    result = service.get_hierarchical_page(page, page_size, search, sort, ascending)
    return PageResponse.from_page(result, [_hierarchical_schema(item) for item in result.items])


@router.post("", response_model=MenuCreatedResponse, status_code=status.HTTP_201_CREATED, summary="Create a menu")
def create_menu(payload: MenuCreate, service: MenuTreeService = menu_service_dependency):
    return MenuCreatedResponse(id=service.create_menu(payload))


@router.get("/{menu_id}", response_model=MenuSchema)
def get_menu(menu_id: int, service: MenuTreeService = menu_service_dependency):
    return service.get_menu(menu_id)


@router.put("/{menu_id}", response_model=MenuSchema, summary="Update a menu (reparenting is cycle checked)")
def update_menu(menu_id: int, payload: MenuUpdate, service: MenuTreeService = menu_service_dependency):
    service.update_menu(menu_id, payload)
    return service.get_menu(menu_id)


@router.delete("/{menu_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a menu and its subtree")
def delete_menu(menu_id: int, service: MenuTreeService = menu_service_dependency):
    if not service.delete_menu(menu_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Menu {menu_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{menu_id}/children", response_model=list[MenuSchema])
def get_children(menu_id: int, service: MenuTreeService = menu_service_dependency):
    return service.get_children(menu_id)


@router.get("/{menu_id}/has-children")
def has_children(menu_id: int, service: MenuTreeService = menu_service_dependency):
    return {"menu_id": menu_id, "has_children": service.has_children(menu_id)}


@router.get("/{menu_id}/roles", response_model=list[RoleSchema])
def get_roles_for_menu(menu_id: int, role_graph: RoleGraphService = role_graph_dependency):
    return role_graph.get_roles_for_menu(menu_id)


@router.get("/{menu_id}/roles/page", response_model=PageResponse[RoleSchema])
def get_roles_for_menu_page(
    menu_id: int,
    request: PageRequest = page_request_dependency,
    role_graph: RoleGraphService = role_graph_dependency,
):
    page = role_graph.get_roles_for_menu_page(menu_id, request)
    return PageResponse.from_page(page, [RoleSchema.model_validate(role) for role in page.items])


@router.put("/{menu_id}/roles/{role_id}", response_model=OperationResult, summary="Assign a role to a menu")
def assign_role_to_menu(menu_id: int, role_id: int, role_graph: RoleGraphService = role_graph_dependency):
    return OperationResult(success=role_graph.assign_role_to_menu(menu_id, role_id))


@router.delete("/{menu_id}/roles/{role_id}", response_model=OperationResult, summary="Remove a role from a menu")
def remove_role_from_menu(menu_id: int, role_id: int, role_graph: RoleGraphService = role_graph_dependency):
    return OperationResult(success=role_graph.remove_role_from_menu(menu_id, role_id))
