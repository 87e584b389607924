"""User domain service."""

import dataclasses
import logging
import uuid
from typing import Optional

from paytrack.domain.entities import Permissions, User
from paytrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    user_not_found,
)
from paytrack.domain.permissions import require_permission
from paytrack.domain.state import AppState
from paytrack.utils.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class UserService:
    """Service for managing user accounts."""

    def __init__(self, state: AppState, actor: Optional[User] = None):
        """Initialize user service.

        Args:
            state: Application state holding the user store
            actor: Logged-in user; required for every mutating operation
        """
        self.state = state
        self.actor = actor

    def authenticate(self, username: str, password: str) -> User:
        """Return the user matching the credentials.

        Raises:
            ValidationError: If the username or password is wrong
        """
        user = self.get_user_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            raise ValidationError("Invalid username or password")
        return user

    def verify_actor_password(self, password: str) -> bool:
        """Check a password against the acting user's stored credential."""
        if self.actor is None:
            return False
        current = self.get_user(self.actor.id)
        return current is not None and verify_password(password, current.password_hash)

    def get_user(self, user_id: str) -> Optional[User]:
        for user in self.state.users:
            if user.id == user_id:
                return user
        return None

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self.state.users:
            if user.username == username:
                return user
        return None

    def require_user(self, username: str) -> User:
        """Get a user by username or raise NotFoundError."""
        user = self.get_user_by_username(username)
        if user is None:
            raise NotFoundError(user_not_found(username))
        return user

    def list_users(self) -> list[User]:
        return list(self.state.users)

    def create_user(
        self, username: str, password: str, permissions: Permissions
    ) -> User:
        """Create a user account.

        Raises:
            PermissionDenied: If the actor may not manage users
            ValidationError: If username or password is missing or too short
            ConflictError: If the username is taken
        """
        self._require_manage_users()
        username = username.strip()
        if not username or not password:
            raise ValidationError("Username and password are required")
        self._validate_password(password)
        if self.get_user_by_username(username) is not None:
            raise ConflictError(f"Username '{username}' is already in use")

        user = User(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=hash_password(password),
            permissions=permissions,
        )
        self.state.users.append(user)
        logger.info("Created user %s", username)
        return user

    def update_permissions(self, username: str, permissions: Permissions) -> User:
        """Replace the permission flags of a user."""
        self._require_manage_users()
        user = self.require_user(username)
        updated = dataclasses.replace(user, permissions=permissions)
        self._replace(updated)
        logger.info("Updated permissions of %s: %s", username, ", ".join(permissions.granted()))
        return updated

    def rename_user(self, username: str, new_username: str) -> User:
        """Change a user's login name."""
        self._require_manage_users()
        user = self.require_user(username)
        new_username = new_username.strip()
        if not new_username:
            raise ValidationError("Username is required")
        existing = self.get_user_by_username(new_username)
        if existing is not None and existing.id != user.id:
            raise ConflictError(f"Username '{new_username}' is already in use")
        updated = dataclasses.replace(user, username=new_username)
        self._replace(updated)
        return updated

    def change_password(
        self,
        username: str,
        new_password: str,
        current_password: Optional[str] = None,
    ) -> None:
        """Change a user's password.

        Users may change their own password by confirming the current one.
        Changing someone else's password requires manage_users.

        Raises:
            ValidationError: If the current password is wrong or the new one
                is too short
        """
        user = self.require_user(username)
        is_self = self.actor is not None and self.actor.id == user.id
        if is_self and current_password is not None:
            if not verify_password(current_password, user.password_hash):
                raise ValidationError("Current password is incorrect")
        else:
            self._require_manage_users()

        self._validate_password(new_password)
        self._replace(dataclasses.replace(user, password_hash=hash_password(new_password)))
        logger.info("Changed password of %s", username)

    def delete_user(self, username: str) -> None:
        """Delete a user account.

        Raises:
            ValidationError: If the actor tries to delete their own account
        """
        self._require_manage_users()
        user = self.require_user(username)
        if self.actor is not None and user.id == self.actor.id:
            raise ValidationError("You cannot delete your own account")
        self.state.users = [u for u in self.state.users if u.id != user.id]
        logger.info("Deleted user %s", username)

    def _require_manage_users(self) -> None:
        if self.actor is None:
            raise ValidationError("No user is logged in")
        require_permission(self.actor, "manage_users")

    def _validate_password(self, password: str) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

    def _replace(self, updated: User) -> None:
        self.state.users = [updated if u.id == updated.id else u for u in self.state.users]
        if self.actor is not None and self.actor.id == updated.id:
            self.actor = updated
