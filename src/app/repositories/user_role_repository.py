from sqlalchemy.orm import Session

from app.models import Role, User, UserRole
from app.repositories.ports import UserRoleView
from app.repositories.transaction import commit_unless_scoped
from app.utils.pagination import Page, PageRequest, paginate_query


class UserRoleRepository:
    """Role membership rows keyed by ``(user_id, role_id)``."""

    def __init__(self, session: Session):
        self.session = session

    def _rows(self):
        return (
            self.session.query(UserRole.user_id, UserRole.role_id, User.user_name, Role.role_name)
            .join(User, User.id == UserRole.user_id)
            .join(Role, Role.id == UserRole.role_id)
        )

    @staticmethod
    def _view(row) -> UserRoleView:
        return UserRoleView(user_id=row.user_id, role_id=row.role_id, user_name=row.user_name, role_name=row.role_name)

    def exists(self, user_id: int, role_id: int) -> bool:
        return (
            self.session.query(UserRole)
            .filter(UserRole.user_id == user_id, UserRole.role_id == role_id)
            .first()
            is not None
        )

    def insert(self, user_id: int, role_id: int) -> None:
        self.session.add(UserRole(user_id=user_id, role_id=role_id))
        self.session.flush()
        commit_unless_scoped(self.session)

    def delete(self, user_id: int, role_id: int) -> bool:
        removed = (
            self.session.query(UserRole)
            .filter(UserRole.user_id == user_id, UserRole.role_id == role_id)
            .delete(synchronize_session="fetch")
        )
        commit_unless_scoped(self.session)
        return removed > 0

    def delete_all_for_user(self, user_id: int) -> int:
        removed = self.session.query(UserRole).filter(UserRole.user_id == user_id).delete(synchronize_session="fetch")
        commit_unless_scoped(self.session)
        return removed

    def delete_all_for_role(self, role_id: int) -> int:
        removed = self.session.query(UserRole).filter(UserRole.role_id == role_id).delete(synchronize_session="fetch")
        commit_unless_scoped(self.session)
        return removed

    def list_for_user(self, user_id: int) -> list[UserRoleView]:
        rows = self._rows().filter(UserRole.user_id == user_id).order_by(Role.role_name, UserRole.role_id).all()
        return [self._view(row) for row in rows]

    def list_for_role(self, role_id: int) -> list[UserRoleView]:
        rows = self._rows().filter(UserRole.role_id == role_id).order_by(User.user_name, UserRole.user_id).all()
        return [self._view(row) for row in rows]

    def roles_for_user(self, user_id: int) -> list[Role]:
        return (
            self.session.query(Role)
            .join(UserRole, UserRole.role_id == Role.id)
            .filter(UserRole.user_id == user_id)
            .order_by(Role.role_name, Role.id)
            .all()
        )

    def users_for_role(self, role_id: int) -> list[User]:
        return (
            self.session.query(User)
            .join(UserRole, UserRole.user_id == User.id)
            .filter(UserRole.role_id == role_id)
            .order_by(User.user_name, User.id)
            .all()
        )

    def users_for_role_page(self, role_id: int, request: PageRequest) -> Page[User]:
        query = self.session.query(User).join(UserRole, UserRole.user_id == User.id).filter(UserRole.role_id == role_id)
        return paginate_query(
            query,
            request,
            searchable={"user_name": User.user_name, "name": User.name, "email": User.email},
            id_column=User.id,
            default_order=(User.user_name,),
        )

    def get_page(self, request: PageRequest, user_id: int | None = None, role_id: int | None = None) -> Page[UserRoleView]:
        query = self._rows()
        if user_id is not None:
            query = query.filter(UserRole.user_id == user_id)
        if role_id is not None:
            query = query.filter(UserRole.role_id == role_id)
        page = paginate_query(
            query,
            request,
            searchable={"user_name": User.user_name, "role_name": Role.role_name},
            id_column=(UserRole.user_id, UserRole.role_id),
            default_order=(User.user_name, Role.role_name),
        )
        page.items = [self._view(row) for row in page.items]
        return page
