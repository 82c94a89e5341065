import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from evoting import config
from evoting.errors import InvalidCredential, InvalidInput

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=config.BCRYPT_ROUNDS
)


# Required text fields: non-empty after trimming, returned trimmed
def clean_field(value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput()
    return value.strip()


# Usernames are matched case-insensitively; apply on every write and lookup
def canonical_username(username: str) -> str:
    return username.strip().lower()


# Hash a password
def hash_password(password: str) -> str:
    try:
        return pwd_context.hash(password)
    except ValueError:
        # passlib rejects e.g. NUL bytes for bcrypt
        raise InvalidInput("Password contains unsupported characters")


# Verify a plain password against a hash
def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError as e:
        # Unusable password, or a stored hash passlib cannot identify
        logger.warning(f"Password verification failed: {type(e).__name__}")
        raise InvalidCredential()


# Create JWT access token
def create_access_token(data: dict, expires_delta: Optional[int] = None) -> str:
    to_encode = data.copy()
    minutes = expires_delta if expires_delta is not None else config.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Return the token claims, or raise InvalidCredential if it is bad or expired."""
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        raise InvalidCredential("Invalid or expired token")
    if payload.get("sub") is None:
        raise InvalidCredential("Invalid or expired token")
    return payload
