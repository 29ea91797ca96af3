"""Authentication schemas for the task sharing API."""
from pydantic import BaseModel


class UserPublic(BaseModel):
    id: str
    username: str

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """Response containing JWT token after register or login."""
    token: str
    user: UserPublic


class RegisterRequest(BaseModel):
    """Register request body."""
    username: str
    password: str


class LoginRequest(BaseModel):
    """Login request body."""
    username: str
    password: str


class ValidateTokenResponse(BaseModel):
    valid: bool
    user: UserPublic
