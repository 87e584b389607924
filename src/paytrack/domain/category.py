"""Category domain service."""

import dataclasses
import logging
from typing import Optional

from paytrack.domain.entities import Category, CategoryItemStats, CategoryKind, User
from paytrack.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    category_item_in_use,
)
from paytrack.domain.permissions import require_permission
from paytrack.domain.state import AppState

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for managing the bank, company and business group item lists."""

    def __init__(self, state: AppState, actor: Optional[User] = None):
        """Initialize category service.

        Args:
            state: Application state holding categories and payments
            actor: Logged-in user; required for every mutating operation
        """
        self.state = state
        self.actor = actor

    def get_category(self, kind: CategoryKind) -> Category:
        return self.state.categories[CategoryKind(kind)]

    def list_categories(self) -> list[Category]:
        return [self.state.categories[kind] for kind in CategoryKind]

    def has_item(self, kind: CategoryKind, item: str) -> bool:
        return item in self.get_category(kind).items

    def usage_count(self, kind: CategoryKind, item: str) -> int:
        """Count payments that reference an item."""
        kind = CategoryKind(kind)
        return sum(1 for p in self.state.payments if p.category_value(kind) == item)

    def is_item_in_use(self, kind: CategoryKind, item: str) -> bool:
        kind = CategoryKind(kind)
        return any(p.category_value(kind) == item for p in self.state.payments)

    def add_item(self, kind: CategoryKind, item: str) -> Category:
        """Add an item; the item list is re-sorted afterwards.

        Raises:
            PermissionDenied: If the actor may not manage categories
            ValidationError: If the item is blank
            ConflictError: If the item already exists
        """
        self._require_manage()
        category = self.get_category(kind)
        item = item.strip()
        if not item:
            raise ValidationError("Item name is required")
        if item in category.items:
            raise ConflictError(f"'{item}' already exists in {category.name}")

        updated = dataclasses.replace(category, items=tuple(sorted(category.items + (item,))))
        self._save(updated)
        logger.info("Added '%s' to %s", item, category.name)
        return updated

    def remove_item(self, kind: CategoryKind, item: str) -> Category:
        """Remove an item that no payment references.

        Raises:
            PermissionDenied: If the actor may not manage categories
            NotFoundError: If the item doesn't exist
            DependencyError: If any payment still uses the item
        """
        self._require_manage()
        category = self.get_category(kind)
        if item not in category.items:
            raise NotFoundError(f"'{item}' not found in {category.name}")

        usage = self.usage_count(category.id, item)
        if usage > 0:
            raise DependencyError(category_item_in_use(item, usage))

        updated = dataclasses.replace(
            category, items=tuple(i for i in category.items if i != item)
        )
        self._save(updated)
        logger.info("Removed '%s' from %s", item, category.name)
        return updated

    def rename_item(self, kind: CategoryKind, item: str, new_name: str) -> Category:
        """Rename an item in place, keeping its position."""
        self._require_manage()
        category = self.get_category(kind)
        if item not in category.items:
            raise NotFoundError(f"'{item}' not found in {category.name}")
        new_name = new_name.strip()
        if not new_name:
            raise ValidationError("Item name is required")
        if new_name != item and new_name in category.items:
            raise ConflictError(f"'{new_name}' already exists in {category.name}")
        if self.is_item_in_use(category.id, item):
            raise DependencyError(
                f"Cannot rename '{item}': it is used by existing payments."
            )

        updated = dataclasses.replace(
            category, items=tuple(new_name if i == item else i for i in category.items)
        )
        self._save(updated)
        return updated

    def move_item(self, kind: CategoryKind, item: str, position: int) -> Category:
        """Move an item to a new zero-based position in the list."""
        self._require_manage()
        category = self.get_category(kind)
        if item not in category.items:
            raise NotFoundError(f"'{item}' not found in {category.name}")
        if not 0 <= position < len(category.items):
            raise ValidationError(
                f"Position must be between 0 and {len(category.items) - 1}"
            )

        items = [i for i in category.items if i != item]
        items.insert(position, item)
        updated = dataclasses.replace(category, items=tuple(items))
        self._save(updated)
        return updated

    def item_stats(self, kind: CategoryKind, search: Optional[str] = None) -> list[CategoryItemStats]:
        """Usage count and total amount for every item of a category.

        Args:
            kind: Category to report on
            search: Optional case-insensitive substring filter on item names
        """
        category = self.get_category(kind)
        stats = []
        for item in category.items:
            if search and search.casefold() not in item.casefold():
                continue
            item_payments = [
                p for p in self.state.payments if p.category_value(category.id) == item
            ]
            stats.append(
                CategoryItemStats(
                    item=item,
                    usage=len(item_payments),
                    total_amount=sum(p.amount for p in item_payments),
                )
            )
        return stats

    def _require_manage(self) -> None:
        if self.actor is None:
            raise ValidationError("No user is logged in")
        require_permission(self.actor, "manage_categories")

    def _save(self, category: Category) -> None:
        self.state.categories[category.id] = category
