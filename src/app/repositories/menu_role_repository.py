from sqlalchemy.orm import Session

from app.models import Menu, MenuRole, Role, UserRole
from app.repositories.ports import MenuRoleView
from app.repositories.transaction import commit_unless_scoped
from app.utils.pagination import Page, PageRequest, paginate_query


class MenuRoleRepository:
    """Role <-> menu join rows keyed by ``(menu_id, role_id)``."""

    def __init__(self, session: Session):
        self.session = session

    def _rows(self):
        return (
            self.session.query(MenuRole.menu_id, MenuRole.role_id, Menu.title, Menu.menu_key, Role.role_name)
            .join(Menu, Menu.id == MenuRole.menu_id)
            .join(Role, Role.id == MenuRole.role_id)
        )

    @staticmethod
    def _view(row) -> MenuRoleView:
        return MenuRoleView(
            menu_id=row.menu_id,
            role_id=row.role_id,
            menu_title=row.title,
            menu_key=row.menu_key,
            role_name=row.role_name,
        )

    def exists(self, menu_id: int, role_id: int) -> bool:
        return (
            self.session.query(MenuRole)
            .filter(MenuRole.menu_id == menu_id, MenuRole.role_id == role_id)
            .first()
            is not None
        )

    def insert(self, menu_id: int, role_id: int) -> None:
        self.session.add(MenuRole(menu_id=menu_id, role_id=role_id))
        self.session.flush()
        commit_unless_scoped(self.session)

    def delete(self, menu_id: int, role_id: int) -> bool:
        removed = (
            self.session.query(MenuRole)
            .filter(MenuRole.menu_id == menu_id, MenuRole.role_id == role_id)
            .delete(synchronize_session="fetch")
        )
        commit_unless_scoped(self.session)
        return removed > 0

    def delete_all_for_menu(self, menu_id: int) -> int:
        removed = self.session.query(MenuRole).filter(MenuRole.menu_id == menu_id).delete(synchronize_session="fetch")
        commit_unless_scoped(self.session)
        return removed

    def delete_all_for_role(self, role_id: int) -> int:
        removed = self.session.query(MenuRole).filter(MenuRole.role_id == role_id).delete(synchronize_session="fetch")
        commit_unless_scoped(self.session)
        return removed

    def list_for_menu(self, menu_id: int) -> list[MenuRoleView]:
        rows = self._rows().filter(MenuRole.menu_id == menu_id).order_by(Role.role_name, MenuRole.role_id).all()
        return [self._view(row) for row in rows]

    def list_for_role(self, role_id: int) -> list[MenuRoleView]:
        rows = self._rows().filter(MenuRole.role_id == role_id).order_by(Menu.menu_order, MenuRole.menu_id).all()
        return [self._view(row) for row in rows]

    def menus_for_role(self, role_id: int) -> list[Menu]:
        return (
            self.session.query(Menu)
            .join(MenuRole, MenuRole.menu_id == Menu.id)
            .filter(MenuRole.role_id == role_id)
            .order_by(Menu.menu_order, Menu.id)
            .all()
        )

    def roles_for_menu(self, menu_id: int) -> list[Role]:
        return (
            self.session.query(Role)
            .join(MenuRole, MenuRole.role_id == Role.id)
            .filter(MenuRole.menu_id == menu_id)
            .order_by(Role.role_name, Role.id)
            .all()
        )

    def menus_for_user(self, user_id: int) -> list[Menu]:
        return (
            self.session.query(Menu)
            .join(MenuRole, MenuRole.menu_id == Menu.id)
            .join(UserRole, UserRole.role_id == MenuRole.role_id)
            .filter(UserRole.user_id == user_id)
            .distinct()
            .order_by(Menu.menu_order, Menu.id)
            .all()
        )

    def menus_for_role_page(self, role_id: int, request: PageRequest) -> Page[Menu]:
        query = self.session.query(Menu).join(MenuRole, MenuRole.menu_id == Menu.id).filter(MenuRole.role_id == role_id)
        return paginate_query(
            query,
            request,
            searchable={"title": Menu.title, "menu_key": Menu.menu_key, "url": Menu.url},
            id_column=Menu.id,
            default_order=(Menu.menu_order,),
        )

    def get_page(self, request: PageRequest) -> Page[MenuRoleView]:
        page = paginate_query(
            self._rows(),
            request,
            searchable={"menu_title": Menu.title, "menu_key": Menu.menu_key, "role_name": Role.role_name},
            id_column=(MenuRole.menu_id, MenuRole.role_id),
            default_order=(Menu.menu_order, Role.role_name),
        )
        page.items = [self._view(row) for row in page.items]
        return page
