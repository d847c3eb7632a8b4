from sqlalchemy.orm import Session

from app.models import UIElement, UIElementUserPermission, User
from app.repositories.ports import GrantView
from app.repositories.transaction import commit_unless_scoped


class ElementPermissionRepository:
    """Direct user -> UI element grants keyed by ``(element_id, user_id)``."""

    def __init__(self, session: Session):
        self.session = session

    def _rows(self):
        return (
            self.session.query(
                UIElementUserPermission.element_id,
                UIElementUserPermission.user_id,
                UIElement.element_key,
                UIElement.element_name,
                User.user_name,
                User.name,
                User.email,
            )
            .join(UIElement, UIElement.id == UIElementUserPermission.element_id)
            .join(User, User.id == UIElementUserPermission.user_id)
        )

    @staticmethod
    def _view(row) -> GrantView:
        return GrantView(
            element_id=row.element_id,
            user_id=row.user_id,
            element_key=row.element_key,
            element_name=row.element_name,
            user_name=row.user_name,
            name=row.name,
            email=row.email,
        )

    def _match(self, element_id: int, user_id: int):
        return self.session.query(UIElementUserPermission).filter(
            UIElementUserPermission.element_id == element_id,
            UIElementUserPermission.user_id == user_id,
        )

    def exists(self, element_id: int, user_id: int) -> bool:
        return self._match(element_id, user_id).first() is not None

    def get(self, element_id: int, user_id: int) -> GrantView | None:
        row = (
            self._rows()
            .filter(UIElementUserPermission.element_id == element_id, UIElementUserPermission.user_id == user_id)
            .first()
        )
        return self._view(row) if row is not None else None

    def insert(self, element_id: int, user_id: int) -> None:
        self.session.add(UIElementUserPermission(element_id=element_id, user_id=user_id))
        self.session.flush()
        commit_unless_scoped(self.session)

    def delete(self, element_id: int, user_id: int) -> bool:
        removed = self._match(element_id, user_id).delete(synchronize_session="fetch")
        commit_unless_scoped(self.session)
        return removed > 0

    def delete_all_for_user(self, user_id: int) -> int:
        removed = (
            self.session.query(UIElementUserPermission)
            .filter(UIElementUserPermission.user_id == user_id)
            .delete(synchronize_session="fetch")
        )
        commit_unless_scoped(self.session)
        return removed

    def delete_all_for_element(self, element_id: int) -> int:
        removed = (
            self.session.query(UIElementUserPermission)
            .filter(UIElementUserPermission.element_id == element_id)
            .delete(synchronize_session="fetch")
        )
        commit_unless_scoped(self.session)
        return removed

    def list_for_user(self, user_id: int) -> list[GrantView]:
        rows = (
            self._rows()
            .filter(UIElementUserPermission.user_id == user_id)
            .order_by(UIElement.element_key, UIElementUserPermission.element_id)
            .all()
        )
        return [self._view(row) for row in rows]

    def list_for_element(self, element_id: int) -> list[GrantView]:
        rows = (
            self._rows()
            .filter(UIElementUserPermission.element_id == element_id)
            .order_by(User.user_name, UIElementUserPermission.user_id)
            .all()
        )
        return [self._view(row) for row in rows]

    def granted_element_ids(self, user_id: int) -> set[int]:
        rows = (
            self.session.query(UIElementUserPermission.element_id)
            .filter(UIElementUserPermission.user_id == user_id)
            .all()
        )
        return {row.element_id for row in rows}
