"""
JWT helpers for the API's bearer-token seam.

Token issuance lives with the account service; this API only needs to sign
tokens for tooling/tests and to validate the ones it receives. The token's
`sub` claim is the user id every log and report query is scoped to.

SECURITY REQUIREMENTS:
- SECRET_KEY must be set via environment variable
- SECRET_KEY must be cryptographically secure (32+ characters)
- SECRET_KEY must NEVER be committed to source control
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict
from uuid import UUID
from jose import JWTError, jwt
from core.config import settings

SECRET_KEY = settings.SECRET_KEY

if len(SECRET_KEY) < 32:
    raise ValueError(
        "SECRET_KEY must be at least 32 characters. "
        "Generate with: python -c \"import secrets; print(secrets.token_urlsafe(32))\""
    )

ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    """Token could not be turned into a user id. The message says why."""


def create_access_token(data: Dict, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token. `data` should carry {"sub": str(user_id)}."""
    expires_delta = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return jwt.encode(
        {**data, "exp": datetime.now(timezone.utc) + expires_delta},
        SECRET_KEY,
        algorithm=ALGORITHM,
    )


def decode_access_token(token: str) -> Optional[Dict]:
    """Claims of a valid, unexpired token; None otherwise."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def user_id_from_token(token: str) -> UUID:
    payload = decode_access_token(token)
    if not payload:
        raise InvalidTokenError("Invalid authentication credentials")

    subject = payload.get("sub")
    if not subject:
        raise InvalidTokenError("Invalid token payload")

    try:
        return UUID(subject)
    except ValueError:
        raise InvalidTokenError("Invalid user ID format")
