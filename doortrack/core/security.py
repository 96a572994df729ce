"""Bearer token helpers for identities issued by the external identity provider."""

from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from doortrack.core.config import settings
from doortrack.schemas.identity import Identity

bearer_scheme: HTTPBearer = HTTPBearer(auto_error=True)
TOKEN_EXPIRE_MINUTES: int = 60


def create_access_token(data: dict[str, Any], expires_minutes: int = TOKEN_EXPIRE_MINUTES) -> str:
    """Create a signed JWT access token from payload data."""
    to_encode: dict[str, Any] = data.copy()
    expire: datetime = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(
        to_encode,
        settings.auth_jwt_secret,
        algorithm=settings.auth_jwt_algorithm,
    )


def verify_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT token payload."""
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
        )
    except JWTError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from exc

    return payload


def identity_from_claims(payload: dict[str, Any]) -> Identity:
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
        )
    emails = payload.get("email_addresses")
    if not isinstance(emails, list):
        emails = [payload["email"]] if payload.get("email") else []
    return Identity(
        user_id=str(user_id),
        first_name=payload.get("first_name"),
        email_addresses=[str(email) for email in emails],
    )


def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> Identity:
    """Resolve the caller's identity from the Authorization header."""
    return identity_from_claims(verify_token(credentials.credentials))
