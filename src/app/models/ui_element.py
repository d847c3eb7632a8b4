"""
UI element catalog and direct per-user grants.

A row in ``ui_element_user_permissions`` *is* the grant; a missing row means
the user does not have the element.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text

from app.db import Base
from app.db.types import UTCDateTime
from app.utils.helpers import utc_now


class UIElement(Base):
    __tablename__ = "ui_elements"

    id = Column(Integer, primary_key=True, index=True)
    element_key = Column(String(100), unique=True, nullable=False, index=True)  # e.g., 'btn-export-excel'
    element_name = Column(String(128), nullable=False)
    element_type = Column(String(32), nullable=False, default="button", index=True)  # 'button', 'tab', 'field', ...
    description = Column(Text, nullable=True)
    created_at = Column(UTCDateTime, default=utc_now, nullable=False)
    updated_at = Column(UTCDateTime, default=utc_now, onupdate=utc_now, nullable=False)


class UIElementUserPermission(Base):
    __tablename__ = "ui_element_user_permissions"

    element_id = Column(Integer, ForeignKey("ui_elements.id"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True, index=True)
