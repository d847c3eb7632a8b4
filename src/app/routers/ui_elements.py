"""
Router for the UI element catalog and per-element grants.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.dependencies.authz import require_admin
from app.dependencies.pagination import get_page_request, get_sort_spec
from app.dependencies.services import get_permission_service
from app.schemas.common_schemas import OperationResult, PageResponse
from app.schemas.ui_element_schemas import GrantSchema, UIElementCreate, UIElementSchema, UIElementUpdate
from app.services.permissions import PermissionService
from app.utils.pagination import PageRequest, SortSpec

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/ui-elements", tags=["UI_Element_Management"], dependencies=[Depends(require_admin)])

# Module-level dependency objects to avoid calling Depends() in function defaults
permission_service_dependency = Depends(get_permission_service)
page_request_dependency = Depends(get_page_request)
sort_dependency = Depends(get_sort_spec)


@router.get("", response_model=PageResponse[UIElementSchema], summary="Search UI elements (paged)")
def get_elements_page(
    request: PageRequest = page_request_dependency,
    sort: SortSpec | None = sort_dependency,
    permissions: PermissionService = permission_service_dependency,
):
    page = permissions.get_elements_page(request, sort)
    return PageResponse.from_page(page, [UIElementSchema.model_validate(element) for element in page.items])


@router.get("/by-type/{element_type}", response_model=list[UIElementSchema])
def get_elements_by_type(element_type: str, permissions: PermissionService = permission_service_dependency):
    return permissions.get_elements_by_type(element_type)


@router.get("/by-key/{element_key}", response_model=UIElementSchema)
def get_element_by_key(element_key: str, permissions: PermissionService = permission_service_dependency):
    element = permissions.get_element_by_key(element_key)
    if element is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"UIElement {element_key!r} not found")
    return element


@router.post("", response_model=UIElementSchema, status_code=status.HTTP_201_CREATED)
def create_element(payload: UIElementCreate, permissions: PermissionService = permission_service_dependency):
    element_id = permissions.create_element(payload)
    return permissions.get_element(element_id)


@router.get("/{element_id}", response_model=UIElementSchema)
def get_element(element_id: int, permissions: PermissionService = permission_service_dependency):
    return permissions.get_element(element_id)


@router.put("/{element_id}", response_model=UIElementSchema)
def update_element(
    element_id: int,
    payload: UIElementUpdate,
    permissions: PermissionService = permission_service_dependency,
):
    permissions.update_element(element_id, payload)
    return permissions.get_element(element_id)


@router.delete("/{element_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an element and its grants")
def delete_element(element_id: int, permissions: PermissionService = permission_service_dependency):
    if not permissions.delete_element(element_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"UIElement {element_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{element_id}/grants", response_model=list[GrantSchema], summary="Users holding this element")
def get_grants_for_element(element_id: int, permissions: PermissionService = permission_service_dependency):
    return [GrantSchema.model_validate(grant) for grant in permissions.get_grants_for_element(element_id)]


@router.get("/{element_id}/grants/{user_id}", response_model=GrantSchema)
def get_permission(element_id: int, user_id: int, permissions: PermissionService = permission_service_dependency):
    return GrantSchema.model_validate(permissions.get_permission(element_id, user_id))


@router.put("/{element_id}/grants/{user_id}", response_model=OperationResult, summary="Grant if not already granted")
def grant_element(element_id: int, user_id: int, permissions: PermissionService = permission_service_dependency):
    return OperationResult(success=permissions.grant_if_absent(element_id, user_id))


@router.delete("/{element_id}/grants/{user_id}", response_model=OperationResult, summary="Revoke a grant")
def revoke_element(element_id: int, user_id: int, permissions: PermissionService = permission_service_dependency):
    return OperationResult(success=permissions.revoke(element_id, user_id))
