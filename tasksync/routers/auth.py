"""Authentication router: registration, login and token validation."""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select
import bcrypt

from tasksync.config import PASSWORD_MIN_LENGTH, USERNAME_MIN_LENGTH
from tasksync.db.config import get_session
from tasksync.errors import NotFoundError, UnauthorizedError, ValidationError
from tasksync.middleware.auth import CurrentUser, create_access_token, get_current_user
from tasksync.models.user import User
from tasksync.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserPublic,
    ValidateTokenResponse,
)

router = APIRouter(tags=["Authentication"])

INVALID_CREDENTIALS = "Invalid credentials"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        token=create_access_token(user.id, user.username),
        user=UserPublic(id=user.id, username=user.username)
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, session: Session = Depends(get_session)):
    username = request.username.strip()
    errors = []
    if len(username) < USERNAME_MIN_LENGTH:
        errors.append(f"Username must be at least {USERNAME_MIN_LENGTH} characters")
    if len(request.password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(request.password.encode("utf-8")) > 72:
        errors.append("Password must be at most 72 bytes")
    if errors:
        raise ValidationError("Validation error", details={"errors": errors})

    existing = session.exec(select(User).where(User.username == username)).first()
    if existing:
        raise ValidationError("Username already taken")

    user = User(username=username, password_hash=hash_password(request.password))
    session.add(user)
    session.commit()
    session.refresh(user)
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, session: Session = Depends(get_session)):
    if not request.username.strip() or not request.password:
        raise ValidationError("Username and password are required")

    user = session.exec(select(User).where(User.username == request.username.strip())).first()
    if not user or not verify_password(request.password, user.password_hash):
        raise UnauthorizedError(INVALID_CREDENTIALS)
    return _token_response(user)


@router.get("/validate-token", response_model=ValidateTokenResponse)
async def validate_token(
    current_user: CurrentUser = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    user = session.get(User, current_user.user_id)
    if not user:
        raise NotFoundError("User not found")
    return ValidateTokenResponse(valid=True, user=UserPublic(id=user.id, username=user.username))
