"""Identity providers: who the progress engine is acting for"""
import logging
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    def current_user_id(self) -> Optional[str]:
        """Current user's id, or None when nobody is signed in"""
        ...


class SessionIdentity:
    """In-process session holder for a single signed-in user"""

    def __init__(self, user_id: Optional[str] = None):
        self._user_id = user_id

    def current_user_id(self) -> Optional[str]:
        return self._user_id

    def sign_in(self, user_id: str) -> None:
        if not user_id:
            raise ValueError("user_id is required to sign in")
        self._user_id = user_id
        logger.info(f"User {user_id} signed in")

    def sign_out(self) -> None:
        if self._user_id:
            logger.info(f"User {self._user_id} signed out")
        self._user_id = None


class RequestIdentity:
    """Fixed identity taken from an authenticated API request"""

    def __init__(self, user_id: str):
        self.user_id = user_id

    def current_user_id(self) -> Optional[str]:
        return self.user_id
