"""
Router for user account administration, role membership and element grants.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.dependencies.authz import require_admin
from app.dependencies.pagination import get_page_request, get_sort_spec
from app.dependencies.services import get_permission_service, get_role_graph_service, get_user_service
from app.schemas.common_schemas import OperationResult, PageResponse
from app.schemas.role_schemas import RoleSchema, UserRoleSchema
from app.schemas.ui_element_schemas import ElementWithPermissionSchema, GrantSchema, ReplaceGrantsRequest, UIElementSchema
from app.schemas.user_schemas import ChangePasswordRequest, UserCreate, UserSchema, UserUpdate
from app.services.permissions import PermissionService
from app.services.role_graph import RoleGraphService
from app.services.users import UserService
from app.utils.pagination import PageRequest, SortSpec

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/users", tags=["User_Management"], dependencies=[Depends(require_admin)])

# Module-level dependency objects to avoid calling Depends() in function defaults
user_service_dependency = Depends(get_user_service)
role_graph_dependency = Depends(get_role_graph_service)
permission_service_dependency = Depends(get_permission_service)
page_request_dependency = Depends(get_page_request)
sort_dependency = Depends(get_sort_spec)


@router.get("", response_model=PageResponse[UserSchema], summary="Search users (paged)")
def get_users_page(
    request: PageRequest = page_request_dependency,
    sort: SortSpec | None = sort_dependency,
    users: UserService = user_service_dependency,
):
    page = users.get_users_page(request, sort)
    return PageResponse.from_page(page, [UserSchema.model_validate(user) for user in page.items])


@router.post("", response_model=UserSchema, status_code=status.HTTP_201_CREATED, summary="Create a user")
def create_user(payload: UserCreate, users: UserService = user_service_dependency):
    user_id = users.create_user(payload)
    return users.get_user(user_id)


@router.get("/{user_id}", response_model=UserSchema)
def get_user(user_id: int, users: UserService = user_service_dependency):
    return users.get_user(user_id)


@router.put("/{user_id}", response_model=UserSchema)
def update_user(user_id: int, payload: UserUpdate, users: UserService = user_service_dependency):
    users.update_user(user_id, payload)
    return users.get_user(user_id)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
    description="Removes the user along with its role memberships and element grants.",
)
def delete_user(user_id: int, users: UserService = user_service_dependency):
    if not users.delete_user(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/password", response_model=OperationResult, summary="Set a new password")
def change_password(user_id: int, payload: ChangePasswordRequest, users: UserService = user_service_dependency):
    return OperationResult(success=users.change_password(user_id, payload.new_password))


# ----------------------------------------------------------------------------
# Role membership
# ----------------------------------------------------------------------------


@router.get("/{user_id}/roles", response_model=list[RoleSchema])
def get_roles_for_user(user_id: int, role_graph: RoleGraphService = role_graph_dependency):
    return role_graph.get_roles_for_user(user_id)


@router.get("/{user_id}/roles/page", response_model=PageResponse[RoleSchema])
def get_roles_for_user_page(
    user_id: int,
    request: PageRequest = page_request_dependency,
    role_graph: RoleGraphService = role_graph_dependency,
):
    page = role_graph.get_roles_for_user_page(user_id, request)
    return PageResponse.from_page(page, [RoleSchema.model_validate(role) for role in page.items])


@router.get("/{user_id}/role-links", response_model=list[UserRoleSchema])
def get_role_links_for_user(user_id: int, role_graph: RoleGraphService = role_graph_dependency):
    return [UserRoleSchema.model_validate(view) for view in role_graph.get_user_links_for_user(user_id)]


@router.put("/{user_id}/roles/{role_id}", response_model=OperationResult, summary="Add the user to a role")
def assign_role_to_user(user_id: int, role_id: int, role_graph: RoleGraphService = role_graph_dependency):
    return OperationResult(success=role_graph.assign_role_to_user(user_id, role_id))


@router.delete("/{user_id}/roles/{role_id}", response_model=OperationResult, summary="Remove the user from a role")
def remove_role_from_user(user_id: int, role_id: int, role_graph: RoleGraphService = role_graph_dependency):
    return OperationResult(success=role_graph.remove_role_from_user(user_id, role_id))


# ----------------------------------------------------------------------------
# UI element grants
# ----------------------------------------------------------------------------


@router.get("/{user_id}/permissions", response_model=list[GrantSchema], summary="Direct element grants of a user")
def get_grants_for_user(user_id: int, permissions: PermissionService = permission_service_dependency):
    return [GrantSchema.model_validate(grant) for grant in permissions.get_grants_for_user(user_id)]


@router.put(
    "/{user_id}/permissions",
    response_model=OperationResult,
    summary="Replace all element grants of a user",
    description="Full replace: the user ends up holding exactly the listed elements. An empty list removes every grant.",
)
def replace_user_grants(
    user_id: int,
    payload: ReplaceGrantsRequest,
    permissions: PermissionService = permission_service_dependency,
):
    return OperationResult(success=permissions.replace_user_grants(user_id, payload.element_ids))


@router.post("/{user_id}/permissions/batch", response_model=OperationResult, summary="Batch assign element grants")
def assign_permissions_batch(
    user_id: int,
    payload: ReplaceGrantsRequest,
    permissions: PermissionService = permission_service_dependency,
):
    return OperationResult(success=permissions.assign_permissions_batch(user_id, payload.element_ids))


@router.get(
    "/{user_id}/elements",
    response_model=list[ElementWithPermissionSchema],
    summary="Every UI element flagged by whether the user holds it",
)
def get_elements_with_permission(user_id: int, permissions: PermissionService = permission_service_dependency):
    return [
        ElementWithPermissionSchema(**UIElementSchema.model_validate(item.element).model_dump(), is_granted=item.is_granted)
        for item in permissions.get_elements_with_effective_permission(user_id)
    ]
