"""Password hashing and bearer token helpers."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import jwt
from passlib.context import CryptContext

from guestlist.config.settings import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(
    subject: str,
    role: str,
    tenant_id: str | None = None,
    token_version: int | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Mint a signed token for a caller.

    Tenant owner tokens carry their tenant; operator tokens carry the token
    version that was current at login.
    """
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload: dict[str, Any] = {
        "sub": subject,
        "role": role,
        "iat": now,
        "exp": expire,
    }
    if tenant_id is not None:
        payload["tenant_id"] = tenant_id
    if token_version is not None:
        payload["ver"] = token_version
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Raises jose.JWTError for an invalid, expired or tampered token."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
