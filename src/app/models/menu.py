"""
Menu model for the navigation tree.

Menus are stored flat: every row carries its own ``parent_id`` and the
parent/children adjacency is rebuilt on demand (see ``app.services.menu_tree``).
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, SmallInteger, String

from app.db import Base
from app.db.types import UTCDateTime
from app.utils.helpers import utc_now


class Menu(Base):
    __tablename__ = "menus"

    id = Column(Integer, primary_key=True, index=True)
    parent_id = Column(Integer, ForeignKey("menus.id"), nullable=True, index=True)  # NULL means root
    menu_order = Column(Integer, nullable=False, default=0)  # Sibling ordering key
    menu_key = Column(String(100), unique=True, nullable=False, index=True)
    title = Column(String(128), nullable=False)
    url = Column(String(256), nullable=True)
    levels = Column(SmallInteger, nullable=True)  # Cached depth hint, not authoritative
    use_new_icon = Column(Boolean, nullable=False, default=False)
    created_at = Column(UTCDateTime, default=utc_now, nullable=False)
    updated_at = Column(UTCDateTime, default=utc_now, onupdate=utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"<Menu id={self.id} key={self.menu_key!r} parent={self.parent_id}>"
