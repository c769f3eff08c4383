"""
Authentication router for registration and login.
"""

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from task_manager.core.dependencies import get_db
from task_manager.schemas.base import MessageResponse
from task_manager.schemas.user import LoginRequest, LoginResponse, RegisterRequest
from task_manager.services.auth_service import AuthService

router = APIRouter(tags=["Authentication"])


@router.post("/register", response_model=MessageResponse)
async def register(
    data: RegisterRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """
    Register a new user.

    The password is stored as a bcrypt hash; usernames are unique.
    """
    auth_service = AuthService(db)
    await auth_service.register(data)
    return MessageResponse(message="Registration successful")


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """
    Authenticate a user and return a JWT access token.

    The token is valid for 24 hours and must be sent back as
    ``Authorization: Bearer <token>``.
    """
    auth_service = AuthService(db)
    token = await auth_service.login(credentials)
    return LoginResponse(token=token)
