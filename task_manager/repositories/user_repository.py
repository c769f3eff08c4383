"""
User repository - database operations for User.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from task_manager.models.user import USER_COLLECTION, User


class UsernameTakenError(Exception):
    """Raised when a username is already registered."""


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[USER_COLLECTION]

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by username (case-sensitive)."""
        doc = await self.collection.find_one({"username": username})
        if doc is None:
            return None
        return User.from_document(doc)

    async def create(self, username: str, hashed_password: str) -> User:
        """Create a new user from an already hashed password."""
        if await self.get_by_username(username) is not None:
            raise UsernameTakenError(username)

        user = User(username=username, hashed_password=hashed_password)
        try:
            await self.collection.insert_one(user.to_document())
        except DuplicateKeyError as exc:
            # Lost a race with a concurrent registration; the unique index wins
            raise UsernameTakenError(username) from exc
        return user
