from collections.abc import Sequence

from app.models import UIElement
from app.repositories.base import SqlAlchemyRepository


class UIElementRepository(SqlAlchemyRepository[UIElement]):
    model = UIElement
    searchable = {
        "element_key": UIElement.element_key,
        "element_name": UIElement.element_name,
        "element_type": UIElement.element_type,
        "description": UIElement.description,
    }
    sortable = {
        "id": UIElement.id,
        "element_key": UIElement.element_key,
        "element_name": UIElement.element_name,
        "element_type": UIElement.element_type,
        "created_at": UIElement.created_at,
        "updated_at": UIElement.updated_at,
    }
    default_order = (UIElement.element_type, UIElement.element_key)

    def get_by_key(self, element_key: str) -> UIElement | None:
        return self.session.query(UIElement).filter(UIElement.element_key == element_key).one_or_none()

    def get_by_type(self, element_type: str) -> list[UIElement]:
        return (
            self.session.query(UIElement)
            .filter(UIElement.element_type == element_type)
            .order_by(UIElement.element_key, UIElement.id)
            .all()
        )

    def existing_ids(self, element_ids: Sequence[int]) -> set[int]:
        if not element_ids:
            return set()
        rows = self.session.query(UIElement.id).filter(UIElement.id.in_(list(element_ids))).all()
        return {row.id for row in rows}
