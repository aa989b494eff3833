"""
User and session data models for the authentication service.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class UserRole(str, Enum):
    """Staff roles; each carries a fixed capability set"""
    ADMIN = "ADMIN"
    CLERK = "CLERK"
    VIEWER = "VIEWER"


@dataclass(frozen=True)
class User:
    """User data model, keyed exactly like the `users` collection"""
    id: str
    username: str
    role: UserRole
    name: str
    password: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'User':
        """Build a user from a store record; raises KeyError/ValueError on malformed data"""
        return cls(
            id=str(record["id"]),
            username=record["username"],
            role=UserRole(record["role"]),
            name=record.get("name") or record["username"],
            password=record.get("password")
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "password": self.password,
            "role": self.role.value,
            "name": self.name,
        }

    @property
    def initial(self) -> str:
        return self.name[:1].upper() if self.name else "?"


@dataclass
class UserSession:
    """Identity of the signed-in staff member for this browser session"""
    user_id: str
    username: str
    name: str
    role: UserRole
    signed_in_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def for_user(cls, user: User) -> 'UserSession':
        return cls(user_id=user.id, username=user.username, name=user.name, role=user.role)


@dataclass
class UserDraft:
    """Form data for creating or editing a user account"""
    name: str
    username: str
    role: UserRole = UserRole.VIEWER
    password: Optional[str] = None
