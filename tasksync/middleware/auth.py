"""JWT authentication dependency for FastAPI."""
from datetime import timedelta
from fastapi import Request
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import BaseModel
from typing import Optional

from tasksync.config import JWT_ALGORITHM, JWT_EXPIRE_DAYS, JWT_SECRET
from tasksync.errors import UnauthorizedError
from tasksync.utils.dates import utc_now

TOKEN_MISSING = "No token, authorization denied"
TOKEN_INVALID = "Token invalid"


class CurrentUser(BaseModel):
    """User information extracted from JWT."""
    user_id: str
    username: Optional[str] = None


def create_access_token(user_id: str, username: str) -> str:
    expire = utc_now() + timedelta(days=JWT_EXPIRE_DAYS)
    payload = {
        "sub": user_id,
        "username": username,
        "exp": expire,
        "iat": utc_now(),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


async def get_current_user(request: Request) -> CurrentUser:
    """
    Validate JWT token from Authorization header and extract user information.

    Args:
        request: FastAPI request object to extract Authorization header

    Returns:
        CurrentUser with user_id and username from token

    Raises:
        UnauthorizedError: If token is missing, invalid or expired
    """
    auth_header = request.headers.get("authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise UnauthorizedError(TOKEN_MISSING)

    token = auth_header[7:]  # Remove "Bearer " prefix

    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except JWTError:
        raise UnauthorizedError(TOKEN_INVALID)

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError("Invalid token: missing user ID")

    return CurrentUser(user_id=user_id, username=payload.get("username"))
