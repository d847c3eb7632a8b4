from sqlalchemy import func

from app.models import User
from app.repositories.base import SqlAlchemyRepository


def normalize_user_name(user_name: str | None) -> str:
    return (user_name or "").strip().lower()


class UserRepository(SqlAlchemyRepository[User]):
    model = User
    searchable = {"user_name": User.user_name, "name": User.name, "email": User.email}
    sortable = {
        "id": User.id,
        "user_name": User.user_name,
        "name": User.name,
        "email": User.email,
        "created_at": User.created_at,
        "updated_at": User.updated_at,
    }
    default_order = (User.user_name,)

    def get_by_user_name(self, user_name: str) -> User | None:
        normalized = normalize_user_name(user_name)
        if not normalized:
            return None
        return self.session.query(User).filter(func.lower(User.user_name) == normalized).one_or_none()
