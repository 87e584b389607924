"""Abstract database interface."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from paytrack.domain.entities import Category, CategoryKind, Payment, User
from paytrack.domain.state import AppState

logger = logging.getLogger(__name__)


class Database(ABC):
    """Abstract database interface for paytrack."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def list_users(self) -> list[User]:
        """List all users."""
        pass

    @abstractmethod
    def replace_users(self, users: list[User]) -> None:
        """Replace the stored user list."""
        pass

    # Payment operations
    @abstractmethod
    def list_payments(self) -> list[Payment]:
        """List all payments in store order."""
        pass

    @abstractmethod
    def replace_payments(self, payments: list[Payment]) -> None:
        """Replace the stored payment list."""
        pass

    # Category operations
    @abstractmethod
    def list_category_items(self, kind: CategoryKind) -> Optional[list[str]]:
        """List the items of a category in order, or None if never stored."""
        pass

    @abstractmethod
    def replace_category_items(self, kind: CategoryKind, items: list[str]) -> None:
        """Replace the stored items of a category."""
        pass

    @abstractmethod
    def commit(self) -> None:
        """Commit pending changes."""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Discard pending changes."""
        pass

    def load_state(self, admin_password: Optional[str] = None) -> AppState:
        """Load the application state, seeding defaults on first use.

        Args:
            admin_password: Password for the seeded admin account; the
                PAYTRACK_ADMIN_PASSWORD environment variable is used if None
        """
        users = self.list_users()
        if not users:
            logger.info("No users found, seeding default state")
            state = AppState.seeded(admin_password)
            self.save_state(state)
            return state

        state = AppState(payments=self.list_payments(), users=users)
        for kind in CategoryKind:
            items = self.list_category_items(kind)
            if items is not None:
                state.categories[kind] = Category(id=kind, name=kind.label, items=tuple(items))
        logger.debug(
            "Loaded %d payment(s) and %d user(s)", len(state.payments), len(state.users)
        )
        return state

    def save_state(self, state: AppState) -> None:
        """Persist the whole application state in one transaction."""
        try:
            self.replace_users(state.users)
            self.replace_payments(state.payments)
            for kind, category in state.categories.items():
                self.replace_category_items(kind, list(category.items))
            self.commit()
        except Exception:
            self.rollback()
            raise
        logger.debug("Saved %d payment(s)", len(state.payments))
