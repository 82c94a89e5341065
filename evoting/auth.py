import logging
from typing import Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from evoting import config
from evoting.errors import Forbidden, InvalidCredential
from evoting.security import (
    clean_field,
    create_access_token,
    decode_access_token,
    verify_password,
)

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_VOTER = "voter"

# auto_error=False so a missing header gets our own 401 envelope
security = HTTPBearer(auto_error=False)


def login_admin(username: Optional[str], password: Optional[str]) -> str:
    """Check the configured admin credentials and return an admin token"""
    username = clean_field(username)
    clean_field(password)
    if not config.ADMIN_PASSWORD_HASH:
        logger.warning("Admin login attempted but ADMIN_PASSWORD_HASH is not set")
        raise InvalidCredential()
    if username.lower() != config.ADMIN_USERNAME.lower():
        raise InvalidCredential()
    if not verify_password(password, config.ADMIN_PASSWORD_HASH):
        logger.warning("Failed admin login")
        raise InvalidCredential()
    return create_access_token({"sub": config.ADMIN_USERNAME, "role": ROLE_ADMIN})


def create_voter_token(voter_id: str) -> str:
    return create_access_token({"sub": voter_id, "role": ROLE_VOTER})


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> dict:
    """Decode the bearer token and return its claims"""
    if credentials is None:
        raise InvalidCredential("Not authenticated")
    return decode_access_token(credentials.credentials)


def get_current_admin(current_user: dict = Depends(get_current_user)) -> dict:
    """Check that the caller holds an admin token"""
    if current_user.get("role") != ROLE_ADMIN:
        raise Forbidden()
    return current_user
