from sqlalchemy import func

from app.models import Menu
from app.repositories.base import SqlAlchemyRepository


class MenuRepository(SqlAlchemyRepository[Menu]):
    model = Menu
    searchable = {"menu_key": Menu.menu_key, "title": Menu.title, "url": Menu.url}
    sortable = {
        "id": Menu.id,
        "parent_id": Menu.parent_id,
        "menu_order": Menu.menu_order,
        "menu_key": Menu.menu_key,
        "title": Menu.title,
        "url": Menu.url,
        "levels": Menu.levels,
        "created_at": Menu.created_at,
        "updated_at": Menu.updated_at,
    }
    default_order = (Menu.menu_order,)

    def get_by_key(self, menu_key: str) -> Menu | None:
        return self.session.query(Menu).filter(Menu.menu_key == menu_key).one_or_none()

    def get_all_for_tree(self) -> list[Menu]:
        # NULL levels sort with the roots so un-levelled rows still come out first
        return (
            self.session.query(Menu)
            .order_by(func.coalesce(Menu.levels, 0), Menu.menu_order, Menu.id)
            .all()
        )

    def get_children_of(self, menu_id: int) -> list[Menu]:
        return (
            self.session.query(Menu)
            .filter(Menu.parent_id == menu_id)
            .order_by(Menu.menu_order, Menu.id)
            .all()
        )

    def has_children(self, menu_id: int) -> bool:
        return self.session.query(Menu.id).filter(Menu.parent_id == menu_id).first() is not None
