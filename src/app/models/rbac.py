from sqlalchemy import Column, ForeignKey, Integer, String

from app.db import Base
from app.db.types import UTCDateTime
from app.utils.helpers import utc_now


class Role(Base):
    __tablename__ = "roles"
    id = Column(Integer, primary_key=True, index=True)
    role_name = Column(String(64), unique=True, nullable=False, index=True)
    role_comment = Column(String(256), nullable=True, default="")
    created_at = Column(UTCDateTime, default=utc_now, nullable=False)
    updated_at = Column(UTCDateTime, default=utc_now, onupdate=utc_now, nullable=False)


# Join rows: the composite key is the whole record. No ORM relationships are
# declared; the opposite side is resolved with explicit joined queries.


class MenuRole(Base):
    __tablename__ = "menu_roles"
    menu_id = Column(Integer, ForeignKey("menus.id"), primary_key=True)
    role_id = Column(Integer, ForeignKey("roles.id"), primary_key=True, index=True)


class UserRole(Base):
    __tablename__ = "user_roles"
    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    role_id = Column(Integer, ForeignKey("roles.id"), primary_key=True, index=True)
