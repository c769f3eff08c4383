"""
User document model.

Users are stored in the ``users`` collection. The username is the primary key
and is also the identity carried in access tokens.
"""

from dataclasses import dataclass
from typing import Any, Dict


USER_COLLECTION = "users"


@dataclass
class User:
    username: str
    hashed_password: str

    def to_document(self) -> Dict[str, Any]:
        return {"username": self.username, "password": self.hashed_password}

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "User":
        return cls(username=doc["username"], hashed_password=doc.get("password", ""))
