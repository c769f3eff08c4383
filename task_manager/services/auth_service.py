"""
Authentication service for registration, login and token management.
"""

import logging

from fastapi import status
from motor.motor_asyncio import AsyncIOMotorDatabase
from starlette.concurrency import run_in_threadpool

from task_manager.core.jwt import create_access_token
from task_manager.core.security import hash_password, verify_password
from task_manager.errors import raise_app_error, raise_unauthorized
from task_manager.repositories.user_repository import UserRepository, UsernameTakenError
from task_manager.schemas.user import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.user_repository = UserRepository(db)

    async def register(self, data: RegisterRequest) -> None:
        """
        Register a new user with a bcrypt-hashed password.

        Raises:
            AppError 400: empty username/password or username already taken
            AppError 500: hashing failed
        """
        if not data.username or not data.password:
            raise_app_error(
                status.HTTP_400_BAD_REQUEST,
                "CREDENTIALS_REQUIRED",
                "Username and password are required",
            )

        try:
            hashed = await run_in_threadpool(hash_password, data.password)
        except ValueError:
            logger.exception("Password hashing failed for %s", data.username)
            raise_app_error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "HASH_FAILED",
                "Failed to hash password",
            )

        try:
            await self.user_repository.create(data.username, hashed)
        except UsernameTakenError:
            raise_app_error(
                status.HTTP_400_BAD_REQUEST,
                "USERNAME_TAKEN",
                "Username already registered",
            )

        logger.info("Registered user %s", data.username)

    async def authenticate_user(self, username: str, password: str) -> bool:
        """
        Check a username/password pair.

        Returns:
            True if the user exists and the password matches, False otherwise
        """
        user = await self.user_repository.get_by_username(username)
        if not user:
            return False
        return await run_in_threadpool(verify_password, password, user.hashed_password)

    async def login(self, credentials: LoginRequest) -> str:
        """
        Perform user login.

        Returns:
            Signed access token for the user

        Raises:
            AppError 401: unknown user or wrong password (indistinguishable)
        """
        if not await self.authenticate_user(credentials.username, credentials.password):
            logger.info("Failed login for %s", credentials.username)
            raise_unauthorized("Invalid credentials", "INVALID_CREDENTIALS")

        return create_access_token(credentials.username)
