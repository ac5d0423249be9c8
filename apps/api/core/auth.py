"""
Authentication dependencies.

Resolves the bearer token on each request to the owning User. Every log and
report endpoint is scoped to this user.
"""
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
import logging

from core.database import get_db
from core.exceptions import UnauthorizedError
from core.security import InvalidTokenError, user_id_from_token
from models import User

logger = logging.getLogger(__name__)

# Use auto_error=False to handle missing credentials manually and return 401 (not 403)
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Get the current authenticated user from JWT token.

    Raises UnauthorizedError if token is invalid or user not found.
    """
    if not credentials:
        raise UnauthorizedError("Not authenticated")

    try:
        user_id = user_id_from_token(credentials.credentials)
    except InvalidTokenError as e:
        raise UnauthorizedError(str(e))

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.info(f"Valid token for unknown user {user_id}")
        raise UnauthorizedError("User not found")

    return user
