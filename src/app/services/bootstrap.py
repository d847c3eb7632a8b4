"""
Ensure the administrator account, the administrators role and the membership
between them exist.

Every step is find-or-create, so running it on every process start (or from
several replicas, or repeatedly in tests) converges on the same state.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.schemas.role_schemas import RoleCreate
from app.schemas.user_schemas import UserCreate
from app.services.factory import build_role_graph_service, build_user_service
from app.services.role_graph import RoleGraphService
from app.services.users import UserService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BootstrapResult:
    user_id: int
    role_id: int
    user_created: bool
    role_created: bool
    membership_created: bool


def initialize_admin_account(
    users: UserService,
    role_graph: RoleGraphService,
    settings: Settings | None = None,
    password: str | None = None,
) -> BootstrapResult:
    settings = settings or get_settings()

    user = users.get_user_by_name(settings.admin_username)
    user_created = user is None
    if user_created:
        user_id = users.create_user(
            UserCreate(
                user_name=settings.admin_username,
                password=password or settings.admin_password,
                name=settings.admin_username,
                email=settings.admin_email,
            )
        )
        logger.info("Bootstrap created admin user %r (id=%s)", settings.admin_username, user_id)
    else:
        user_id = user.id
        logger.debug("Bootstrap found admin user %r (id=%s)", settings.admin_username, user_id)

    role = role_graph.get_role_by_name(settings.admin_role_name)
    role_created = role is None
    if role_created:
        role_id = role_graph.create_role(
            RoleCreate(role_name=settings.admin_role_name, role_comment=settings.admin_role_comment)
        )
        logger.info("Bootstrap created role %r (id=%s)", settings.admin_role_name, role_id)
    else:
        role_id = role.id
        logger.debug("Bootstrap found role %r (id=%s)", settings.admin_role_name, role_id)

    membership_created = not role_graph.user_has_role(user_id, role_id)
    if membership_created:
        role_graph.assign_role_to_user(user_id, role_id)
        logger.info("Bootstrap added user %s to role %s", user_id, role_id)

    return BootstrapResult(
        user_id=user_id,
        role_id=role_id,
        user_created=user_created,
        role_created=role_created,
        membership_created=membership_created,
    )


def bootstrap_admin(session: Session, settings: Settings | None = None, password: str | None = None) -> BootstrapResult:
    settings = settings or get_settings()
    return initialize_admin_account(
        build_user_service(session, settings),
        build_role_graph_service(session, settings),
        settings,
        password=password,
    )
