"""
Business logic for users and demo logins.
"""

import logging
from typing import List, Optional

from ..core.exceptions import NotFoundError
from ..core.store import DataStore
from ..schemas.user import User, UserRole

logger = logging.getLogger(__name__)


class UserService:
    """Lookups over the user collection."""

    def __init__(self, store: DataStore) -> None:
        self.store = store

    def get_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self.store.users if u.id == user_id), None)

    def get_user_or_404(self, user_id: str) -> User:
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def list_users(self, role: Optional[UserRole] = None) -> List[User]:
        return [u for u in self.store.users if role is None or u.role == role]

    def login(self, role: UserRole) -> User:
        """Return the demo user for ``role`` (the first user holding it)."""
        user = next((u for u in self.store.users if u.role == role), None)
        if user is None:
            raise NotFoundError(f"No demo user with role {role.value}")
        logger.info("Demo login as %s (%s)", user.id, role.value)
        return user
