"""
Authenticator - validates staff credentials against the cached users collection.
"""

import time
from typing import Callable, Optional

from services.auth_service.models import User
from services.registry_service.errors import InvalidCredentials
from services.registry_service.session_store import SessionStore
from utils.logging_config import get_logger


class Authenticator:
    """
    Checks a username/password pair against the Session Store's users.

    Passwords are stored and compared in plaintext. This matches the
    registry's current data and must be replaced by a salted-hash comparison
    before any real deployment.
    """

    def __init__(self, session_store: SessionStore, login_delay_seconds: float = 1.2,
                 sleep: Callable[[float], None] = time.sleep):
        self.logger = get_logger(__name__)
        self.session_store = session_store
        self.login_delay_seconds = login_delay_seconds
        self._sleep = sleep

    def find_user(self, username: str) -> Optional[User]:
        """First user whose username matches case-insensitively, ignoring surrounding spaces"""
        wanted = (username or "").strip().lower()
        for user in self.session_store.users:
            if user.username.lower() == wanted:
                return user
        return None

    def login(self, username: str, password: str) -> User:
        """
        Authenticate a staff member

        Args:
            username: Username as typed
            password: Password as typed, compared exactly

        Returns:
            The matching User

        Raises:
            InvalidCredentials: for an unknown user or a wrong password alike
        """
        if self.login_delay_seconds > 0:
            self._sleep(self.login_delay_seconds)

        user = self.find_user(username)
        if user is None or user.password is None or user.password != password:
            self.logger.warning(f"Failed login attempt for: {(username or '').strip()}")
            raise InvalidCredentials()

        self.logger.info(f"User authenticated successfully: {user.username}")
        return user
