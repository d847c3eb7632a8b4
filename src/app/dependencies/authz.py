from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.db import get_db
from app.models.user import User as DBUser
from app.services.factory import build_role_graph_service, build_user_service
from app.utils.auth import decode_jwt

bearer = HTTPBearer(auto_error=False)


# Module-level dependency object to avoid calling Depends() in function defaults
bearer_dep = Depends(bearer)
db_dep = Depends(get_db)
settings_dep = Depends(get_settings)


def get_current_user(
    cred: HTTPAuthorizationCredentials = bearer_dep,
    db: Session = db_dep,
) -> DBUser:
    if cred is None or cred.scheme.lower() != "bearer":
        raise HTTPException(401, "missing or invalid authorization header", headers={"WWW-Authenticate": "Bearer"})

    # Swagger UI users sometimes paste "Bearer <token>" into the credentials box
    token = cred.credentials
    if isinstance(token, str) and token.lower().startswith("bearer "):
        token = token.split(" ", 1)[1]

    payload = decode_jwt(token, expected_type="access")
    if not payload:
        raise HTTPException(401, "invalid or expired token", headers={"WWW-Authenticate": "Bearer"})

    user = build_user_service(db).get_user_by_name(payload.get("sub"))
    if not user:
        raise HTTPException(401, "user not found")

    return user


# Module-level dependency object to avoid calling Depends() in function defaults
current_user_dependency = Depends(get_current_user)


def is_admin_user(db: Session, user, settings: Settings | None = None) -> bool:
    settings = settings or get_settings()
    return build_role_graph_service(db, settings).user_has_role_named(user.id, settings.admin_role_name)


def require_admin(
    user: DBUser = current_user_dependency,
    db: Session = db_dep,
    settings: Settings = settings_dep,
) -> DBUser:
    if not is_admin_user(db, user, settings):
        raise HTTPException(403, "admin privileges required")
    return user
