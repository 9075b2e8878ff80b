import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from jobly import config
from jobly.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=config.bcrypt_rounds())
_bearer = HTTPBearer(auto_error=False)


# PUBLIC_INTERFACE
def hash_password(password: str) -> str:
    """Hash a plaintext password."""
    return _pwd_context.hash(password)


# PUBLIC_INTERFACE
def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against a stored hash."""
    return _pwd_context.verify(password, password_hash)


# PUBLIC_INTERFACE
def create_token(user: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT carrying the username and admin flag."""
    is_admin = user.get("isAdmin", False)
    if "isAdmin" not in user:
        logger.warning("create_token called without isAdmin for %s", user.get("username"))

    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=config.jwt_exp_minutes()))
    payload = {"username": user["username"], "isAdmin": bool(is_admin), "exp": expire}
    return jwt.encode(payload, config.secret_key(), algorithm=config.jwt_algorithm())


# PUBLIC_INTERFACE
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Optional[Dict[str, Any]]:
    """
    Dependency returning the token payload of the caller, or None.

    A missing or invalid token is not an error here; routes that need a user
    depend on ensure_admin or ensure_correct_user_or_admin instead.
    """
    if credentials is None:
        return None
    try:
        payload = jwt.decode(credentials.credentials, config.secret_key(), algorithms=[config.jwt_algorithm()])
    except JWTError:
        return None
    if not payload.get("username"):
        return None
    return payload


# PUBLIC_INTERFACE
def ensure_admin(user: Optional[Dict[str, Any]] = Depends(get_current_user)) -> Dict[str, Any]:
    """Dependency that requires an admin token. Non-admins get 401 like anonymous callers."""
    if not user or not user.get("isAdmin"):
        raise UnauthorizedError()
    return user


# PUBLIC_INTERFACE
def ensure_correct_user_or_admin(
    username: str,
    user: Optional[Dict[str, Any]] = Depends(get_current_user),
) -> Dict[str, Any]:
    """Dependency for /users/{username}: the token must belong to that user, or to an admin."""
    if not user or not (user.get("isAdmin") or user.get("username") == username):
        raise UnauthorizedError()
    return user
