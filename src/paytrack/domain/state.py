"""Application state owned by a single paytrack session."""

import os
import uuid
from dataclasses import dataclass, field

from paytrack.domain.entities import Category, CategoryKind, Payment, Permissions, User
from paytrack.utils.passwords import hash_password

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "123456"

DEFAULT_CATEGORY_ITEMS: dict[CategoryKind, tuple[str, ...]] = {
    CategoryKind.BANK: (
        "Halk Bankası",
        "Halk Bankası Hamiline",
        "Ziraat Bankası",
        "Ziraat Bankası Hamiline",
        "Deniz Bank",
    ),
    CategoryKind.COMPANY: (
        "DOĞU İNŞAAT",
        "DOĞU İNŞAAT HAMİLİNE",
        "ALTAY",
        "ALTAY HAMİLİNE",
        "ONURAY İNŞAAT",
    ),
    CategoryKind.BUSINESS_GROUP: (
        "KULU",
        "CİHANBEYLİ",
        "AKHİSAR",
        "AKSARAY",
        "ESENYURT",
        "SHİFA",
        "KONYA OKUL",
        "OKUL ONARIM",
        "HATIR ÇEKİ",
        "DİĞER",
    ),
}


def default_categories() -> dict[CategoryKind, Category]:
    """Build the initial category set."""
    return {
        kind: Category(id=kind, name=kind.label, items=DEFAULT_CATEGORY_ITEMS[kind])
        for kind in CategoryKind
    }


def default_admin(password: str | None = None) -> User:
    """Build the initial administrator account.

    The password comes from PAYTRACK_ADMIN_PASSWORD when not given.
    """
    if password is None:
        password = os.environ.get("PAYTRACK_ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD)
    return User(
        id=str(uuid.uuid4()),
        username=DEFAULT_ADMIN_USERNAME,
        password_hash=hash_password(password),
        permissions=Permissions.all(),
    )


@dataclass
class AppState:
    """Payment, category and user stores of one session.

    Services receive this object explicitly and mutate it in place; the
    database layer loads and saves it as a whole.
    """

    payments: list[Payment] = field(default_factory=list)
    categories: dict[CategoryKind, Category] = field(default_factory=default_categories)
    users: list[User] = field(default_factory=list)

    @classmethod
    def seeded(cls, admin_password: str | None = None) -> "AppState":
        """Create a fresh state with default categories and the admin user."""
        return cls(users=[default_admin(admin_password)])
