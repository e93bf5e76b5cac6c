"""Bearer token authentication for the HTTP API"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .config import settings
from .errors import OperationForbidden, OperationNotAuthorized

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> dict:
    """Verify and decode JWT token"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise OperationNotAuthorized(f"Could not validate credentials: {str(e)}")


def verify_bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme)) -> dict:
    """
    Authenticate the caller when ``AUTH_ENABLED`` is set.

    Only checks identity; what an identified caller may do is decided
    elsewhere.
    """
    if not settings.AUTH_ENABLED:
        return {}

    if not credentials:
        raise OperationNotAuthorized("Missing authentication token")

    payload = verify_token(credentials.credentials)
    if not payload.get("sub"):
        raise OperationForbidden("Token does not identify a subject")
    return payload
