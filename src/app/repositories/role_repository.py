from sqlalchemy import func

from app.models import Role
from app.repositories.base import SqlAlchemyRepository


class RoleRepository(SqlAlchemyRepository[Role]):
    model = Role
    searchable = {"role_name": Role.role_name, "role_comment": Role.role_comment}
    sortable = {
        "id": Role.id,
        "role_name": Role.role_name,
        "role_comment": Role.role_comment,
        "created_at": Role.created_at,
        "updated_at": Role.updated_at,
    }
    default_order = (Role.role_name,)

    def get_by_name(self, role_name: str) -> Role | None:
        normalized = (role_name or "").strip().lower()
        if not normalized:
            return None
        return self.session.query(Role).filter(func.lower(Role.role_name) == normalized).first()
