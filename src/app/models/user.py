from sqlalchemy import Column, Integer, String

from app.db import Base
from app.db.types import UTCDateTime
from app.utils.helpers import utc_now


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    user_name = Column(String(150), unique=True, index=True, nullable=False)
    password = Column(String(256), nullable=False)  # Argon2 hash
    salt = Column(String(64), nullable=True)  # Kept for schema compatibility; Argon2 embeds its salt in the hash
    refresh_token = Column(String(512), nullable=True)
    refresh_token_expiry = Column(UTCDateTime, nullable=True)
    name = Column(String(128), nullable=True)
    email = Column(String(255), nullable=True)
    created_at = Column(UTCDateTime, default=utc_now, nullable=False)
    updated_at = Column(UTCDateTime, default=utc_now, onupdate=utc_now, nullable=False)
