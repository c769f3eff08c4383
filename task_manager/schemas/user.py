"""
User Pydantic schemas.
"""

from pydantic import BaseModel

from task_manager.schemas.base import Envelope


class RegisterRequest(BaseModel):
    """Schema for registering a new user."""

    username: str
    password: str


class LoginRequest(BaseModel):
    """Schema for login request."""

    username: str
    password: str


class LoginResponse(Envelope):
    """Schema for login response."""

    token: str
