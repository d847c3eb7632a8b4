import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Form, HTTPException

from app.dependencies.authz import get_current_user
from app.dependencies.services import get_role_graph_service, get_user_service
from app.models.user import User as DBUser
from app.schemas.auth_schemas import TokenRefreshRequest, TokenResponse, UserResponse
from app.services.role_graph import RoleGraphService
from app.services.users import UserService
from app.utils import auth as auth_utils

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])
# module-level dependency to avoid calling Depends() inside function defaults
current_user_dependency = Depends(get_current_user)
user_service_dependency = Depends(get_user_service)
role_graph_dependency = Depends(get_role_graph_service)


def _user_response(user: DBUser, role_graph: RoleGraphService) -> UserResponse:
    """Build a consistent user response for auth endpoints."""
    roles = [role.role_name for role in role_graph.get_roles_for_user(user.id)]
    admin_role = role_graph.settings.admin_role_name.lower()
    return UserResponse(
        id=user.id,
        user_name=user.user_name,
        name=user.name,
        email=user.email,
        is_admin=any(name.lower() == admin_role for name in roles),
        roles=roles,
    )


def _issue_tokens(user: DBUser, users: UserService, role_graph: RoleGraphService) -> TokenResponse:
    access_token = auth_utils.create_access_token(user)
    refresh_token, expires_at = auth_utils.create_refresh_token(user)
    users.store_refresh_token(user, refresh_token, expires_at)
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        user=_user_response(user, role_graph),
    )


@router.post(
    "/login",
    summary="Login with username/password",
    description="Authenticate against the local user store and receive access and refresh JWTs.",
    response_model=TokenResponse,
)
def login(
    username: Annotated[str, Form(description="Username for authentication (e.g., admin)")],
    password: Annotated[
        str,
        Form(description="User password", json_schema_extra={"format": "password"}),
    ],
    users: UserService = user_service_dependency,
    role_graph: RoleGraphService = role_graph_dependency,
):
    user = users.authenticate(username, password)
    if not user:
        raise HTTPException(status_code=401, detail="invalid credentials", headers={"WWW-Authenticate": "Bearer"})
    logger.info("User %s logged in", user.user_name)
    return _issue_tokens(user, users, role_graph)


@router.post(
    "/refresh",
    summary="Rotate the refresh token",
    description="Exchange a valid refresh token for a new access/refresh pair. The old refresh token stops working.",
    response_model=TokenResponse,
)
def refresh(
    payload: TokenRefreshRequest,
    users: UserService = user_service_dependency,
    role_graph: RoleGraphService = role_graph_dependency,
):
    claims = auth_utils.decode_jwt(payload.refresh_token, expected_type="refresh")
    if not claims:
        raise HTTPException(status_code=401, detail="invalid or expired refresh token")

    user = users.get_user_by_name(claims.get("sub"))
    if user is None or user.refresh_token != payload.refresh_token:
        raise HTTPException(status_code=401, detail="refresh token no longer valid")

    if user.refresh_token_expiry is not None and user.refresh_token_expiry <= datetime.now(UTC):
        raise HTTPException(status_code=401, detail="refresh token expired")

    return _issue_tokens(user, users, role_graph)


@router.get("/me", response_model=UserResponse, summary="Current user with its roles")
def me(
    user: DBUser = current_user_dependency,
    role_graph: RoleGraphService = role_graph_dependency,
):
    return _user_response(user, role_graph)
