import secrets
import time
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import Settings, get_settings
from .exceptions import AuthenticationError

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        # Malformed or unknown digest
        return False


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    # Verified against when the phone is unknown so both login failures cost the same
    return hash_password(secrets.token_urlsafe(16))


def create_jwt(data: dict, settings: Optional[Settings] = None, expires_minutes: Optional[int] = None) -> str:
    settings = settings or get_settings()
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes
    now = datetime.now(timezone.utc)
    to_encode = data.copy()
    to_encode.update({"iat": now, "exp": now + timedelta(minutes=expires_minutes)})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_jwt(token: str, settings: Optional[Settings] = None) -> dict:
    """Verify signature and expiry; raise AuthenticationError otherwise."""
    settings = settings or get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise AuthenticationError("Invalid token")


def generate_registration_no() -> str:
    # REG + epoch milliseconds + 6 random digits
    return f"REG{int(time.time() * 1000)}{secrets.randbelow(10**6):06d}"
