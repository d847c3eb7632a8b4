import logging
import os
import uuid
from datetime import UTC, datetime, timedelta

import jwt
from pwdlib import PasswordHash
from pwdlib.hashers.argon2 import Argon2Hasher

from app.config import get_settings
from app.models.user import User

logger = logging.getLogger(__name__)

# Argon2 tuning (adjust via env)
ARGON2_TIME_COST = int(os.environ.get("ARGON2_TIME_COST", "2"))
ARGON2_MEMORY_COST = int(os.environ.get("ARGON2_MEMORY_COST", str(32_768)))  # KiB
ARGON2_PARALLELISM = int(os.environ.get("ARGON2_PARALLELISM", "2"))

password_hasher = PasswordHash(
    (
        Argon2Hasher(
            time_cost=ARGON2_TIME_COST,
            memory_cost=ARGON2_MEMORY_COST,
            parallelism=ARGON2_PARALLELISM,
        ),
    )
)


def hash_password(password: str) -> str:
    return password_hasher.hash(password)


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return password_hasher.verify(plain, hashed)
    except Exception as exc:
        # malformed or foreign hash formats count as a mismatch
        logger.debug("Password verification failed: %s", exc)
        return False


def _base_payload(user: User) -> dict:
    now = datetime.now(UTC)
    return {
        "sub": user.user_name,
        "uid": user.id,
        "iat": int(now.timestamp()),
        "jti": uuid.uuid4().hex,
    }


def create_access_token(user: User, ttl: int | None = None) -> str:
    settings = get_settings()
    p = _base_payload(user)
    exp = datetime.now(UTC) + timedelta(seconds=(ttl or settings.jwt_ttl_seconds))
    p.update({"type": "access", "exp": int(exp.timestamp())})
    return jwt.encode(p, settings.jwt_secret, algorithm=settings.jwt_alg)


def create_refresh_token(user: User, ttl: int | None = None) -> tuple[str, datetime]:
    """Return the encoded refresh token and its expiry, which is stored on the user row."""
    settings = get_settings()
    p = _base_payload(user)
    exp = datetime.now(UTC) + timedelta(seconds=(ttl or settings.jwt_refresh_ttl_seconds))
    # IMPORTANT: mark type=refresh so it cannot be used for Bearer auth
    p.update({"type": "refresh", "exp": int(exp.timestamp())})
    return jwt.encode(p, settings.jwt_secret, algorithm=settings.jwt_alg), exp


def decode_jwt(token: str, expected_type: str | None = None) -> dict | None:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_alg])
    except jwt.ExpiredSignatureError:
        logger.debug("JWT decode failed: token expired")
        return None
    except jwt.InvalidTokenError as exc:
        logger.debug("JWT decode failed: invalid token (%s)", exc)
        return None
    if expected_type is not None and payload.get("type") != expected_type:
        logger.debug("JWT rejected: expected %s token, got %s", expected_type, payload.get("type"))
        return None
    return payload
