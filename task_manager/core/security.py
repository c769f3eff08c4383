"""
Password hashing and verification utilities.
"""

from typing import Optional

import bcrypt

from task_manager.core.config import settings


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a plain password using bcrypt.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor (defaults to BCRYPT_ROUNDS)

    Returns:
        Bcrypt hashed password as string
    """
    # Ensure password is not longer than 72 bytes (bcrypt limitation)
    password_bytes = password.encode('utf-8')[:72]
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: Plain text password from user input
        hashed_password: Previously hashed password from database

    Returns:
        True if password matches, False otherwise (including a corrupt hash)
    """
    password_bytes = plain_password.encode('utf-8')[:72]
    hashed_bytes = hashed_password.encode('utf-8')
    try:
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        return False
