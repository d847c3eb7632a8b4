"""
Direct user -> UI element grants.

A grant is just the presence of a ``(element_id, user_id)`` row. There is no
role inheritance here: menu visibility (through roles) and element permission
are independent axes.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from app.config import Settings, get_settings
from app.errors import ConflictError, NotFoundError
from app.models import UIElement
from app.repositories.ports import ElementPermissionPort, GrantView, TransactionScope, UIElementPort, UserPort
from app.schemas.ui_element_schemas import UIElementCreate, UIElementUpdate
from app.utils.helpers import dedupe_ids, utc_now
from app.utils.pagination import Page, PageRequest, SortSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementPermission:
    element: UIElement
    is_granted: bool


class PermissionService:
    def __init__(
        self,
        elements: UIElementPort,
        users: UserPort,
        grants: ElementPermissionPort,
        tx: TransactionScope,
        settings: Settings | None = None,
    ):
        self.elements = elements
        self.users = users
        self.grants = grants
        self.tx = tx
        self.settings = settings or get_settings()

    def _require_user(self, user_id: int) -> None:
        if self.users.get_by_id(user_id) is None:
            logger.warning("User %s not found", user_id)
            raise NotFoundError("User", user_id)

    def _require_element(self, element_id: int) -> UIElement:
        element = self.elements.get_by_id(element_id)
        if element is None:
            logger.warning("UI element %s not found", element_id)
            raise NotFoundError("UIElement", element_id)
        return element

    # ------------------------------------------------------------------
    # Grants
    # ------------------------------------------------------------------

    def get_permission(self, element_id: int, user_id: int) -> GrantView:
        grant = self.grants.get(element_id, user_id)
        if grant is None:
            raise NotFoundError("Permission", (element_id, user_id))
        return grant

    def get_grants_for_user(self, user_id: int) -> list[GrantView]:
        return self.grants.list_for_user(user_id)

    def get_grants_for_element(self, element_id: int) -> list[GrantView]:
        return self.grants.list_for_element(element_id)

    def has_permission(self, element_id: int, user_id: int) -> bool:
        return self.grants.exists(element_id, user_id)

    def grant_if_absent(self, element_id: int, user_id: int) -> bool:
        self._require_element(element_id)
        self._require_user(user_id)
        if self.grants.exists(element_id, user_id):
            logger.debug("User %s already holds element %s", user_id, element_id)
            return True
        self.grants.insert(element_id, user_id)
        logger.info("Granted element %s to user %s", element_id, user_id)
        return True

    def revoke(self, element_id: int, user_id: int) -> bool:
        if self.grants.delete(element_id, user_id):
            logger.info("Revoked element %s from user %s", element_id, user_id)
        else:
            logger.debug("User %s did not hold element %s", user_id, element_id)
        return True

    def replace_user_grants(self, user_id: int, element_ids: Sequence[int]) -> bool:
        """Make the user's grants exactly ``element_ids``. An empty list clears them all."""
        wanted = dedupe_ids(element_ids)
        self._require_user(user_id)
        missing = sorted(set(wanted) - self.elements.existing_ids(wanted))
        if missing:
            logger.warning("Rejecting grants for user %s: unknown element(s) %s", user_id, missing)
            raise NotFoundError("UIElement", missing[0] if len(missing) == 1 else missing)

        with self.tx.transaction():
            removed = self.grants.delete_all_for_user(user_id)
            for element_id in wanted:
                self.grants.insert(element_id, user_id)
        logger.info("Replaced grants for user %s: removed %d, granted %d", user_id, removed, len(wanted))
        return True

    def assign_permissions_batch(self, user_id: int, element_ids: Sequence[int]) -> bool:
        """Bulk form used by the permission editor; same full-replace semantics."""
        logger.debug("Batch permission assignment for user %s: %s", user_id, list(element_ids))
        return self.replace_user_grants(user_id, element_ids)

    def get_elements_with_effective_permission(self, user_id: int) -> list[ElementPermission]:
        """Every element in the catalog, each flagged by whether the user holds it."""
        self._require_user(user_id)
        granted = self.grants.granted_element_ids(user_id)
        return [ElementPermission(element=element, is_granted=element.id in granted) for element in self.elements.get_all()]

    # ------------------------------------------------------------------
    # Element catalog
    # ------------------------------------------------------------------

    def create_element(self, data: UIElementCreate) -> int:
        if self.elements.get_by_key(data.element_key) is not None:
            raise ConflictError(f"element key {data.element_key!r} already exists")
        now = utc_now()
        element_id = self.elements.insert(
            UIElement(
                element_key=data.element_key,
                element_name=data.element_name,
                element_type=data.element_type,
                description=data.description,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("Created UI element %s (%s)", element_id, data.element_key)
        return element_id

    def update_element(self, element_id: int, data: UIElementUpdate) -> bool:
        element = self._require_element(element_id)
        if data.element_key is not None and data.element_key != element.element_key:
            other = self.elements.get_by_key(data.element_key)
            if other is not None and other.id != element_id:
                raise ConflictError(f"element key {data.element_key!r} already exists")
            element.element_key = data.element_key
        if data.element_name is not None:
            element.element_name = data.element_name
        if data.element_type is not None:
            element.element_type = data.element_type
        if data.description is not None:
            element.description = data.description
        element.updated_at = utc_now()
        return self.elements.update(element)

    def get_element(self, element_id: int) -> UIElement:
        return self._require_element(element_id)

    def get_element_by_key(self, element_key: str) -> UIElement | None:
        return self.elements.get_by_key(element_key)

    def get_elements_by_type(self, element_type: str) -> list[UIElement]:
        return self.elements.get_by_type(element_type)

    def list_elements(self) -> list[UIElement]:
        return self.elements.get_all()

    def get_elements_page(self, request: PageRequest, sort: SortSpec | None = None) -> Page[UIElement]:
        return self.elements.get_page(request.normalized(self.settings.max_page_size), sort)

    def delete_element(self, element_id: int) -> bool:
        if self.elements.get_by_id(element_id) is None:
            logger.debug("UI element %s not found, nothing to delete", element_id)
            return False
        with self.tx.transaction():
            removed = self.grants.delete_all_for_element(element_id)
            self.elements.delete(element_id)
        logger.info("Deleted UI element %s and %d grant(s)", element_id, removed)
        return True
