"""Domain model entities for paytrack.

These are pure data classes representing business concepts, independent of
the storage schema. Services pass them around; the database layer maps them
to and from SQLAlchemy rows.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class PaymentStatus(str, Enum):
    """Payment status."""

    PENDING = "pending"
    PAID = "paid"

    @property
    def label(self) -> str:
        """Human readable status used in tables and exports."""
        return "Paid" if self is PaymentStatus.PAID else "Unpaid"


class CategoryKind(str, Enum):
    """The three category dimensions a payment is classified by."""

    BANK = "bank"
    COMPANY = "company"
    BUSINESS_GROUP = "businessGroup"

    @property
    def payment_field(self) -> str:
        """Name of the Payment attribute this category constrains."""
        return _PAYMENT_FIELDS[self]

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_PAYMENT_FIELDS = {
    CategoryKind.BANK: "bank",
    CategoryKind.COMPANY: "company",
    CategoryKind.BUSINESS_GROUP: "business_group",
}

_CATEGORY_LABELS = {
    CategoryKind.BANK: "Bank",
    CategoryKind.COMPANY: "Company",
    CategoryKind.BUSINESS_GROUP: "Business Group",
}


@dataclass(frozen=True)
class PaymentDraft:
    """Payment data that has not been assigned an ID yet."""

    due_date: date
    check_number: str
    bank: str
    company: str
    business_group: str
    description: str
    amount: float
    status: PaymentStatus = PaymentStatus.PENDING


@dataclass(frozen=True)
class Payment:
    """Payment (check) domain entity."""

    id: str
    due_date: date
    check_number: str
    bank: str
    company: str
    business_group: str
    description: str
    amount: float
    status: PaymentStatus = PaymentStatus.PENDING

    @property
    def is_paid(self) -> bool:
        return self.status is PaymentStatus.PAID

    def category_value(self, kind: CategoryKind) -> str:
        """Return the value this payment holds for a category dimension."""
        return getattr(self, kind.payment_field)


@dataclass(frozen=True)
class Category:
    """Category with an ordered set of selectable items."""

    id: CategoryKind
    name: str
    items: tuple[str, ...] = ()


@dataclass(frozen=True)
class Permissions:
    """Independent permission flags of a user account."""

    add: bool = False
    edit: bool = False
    delete: bool = False
    change_status: bool = False
    manage_categories: bool = False
    manage_users: bool = False

    @classmethod
    def all(cls) -> "Permissions":
        return cls(
            add=True,
            edit=True,
            delete=True,
            change_status=True,
            manage_categories=True,
            manage_users=True,
        )

    def granted(self) -> list[str]:
        """Names of the flags that are set."""
        return [name for name in PERMISSION_NAMES if getattr(self, name)]


PERMISSION_NAMES = (
    "add",
    "edit",
    "delete",
    "change_status",
    "manage_categories",
    "manage_users",
)


@dataclass(frozen=True)
class User:
    """User account domain entity."""

    id: str
    username: str
    password_hash: str
    permissions: Permissions = field(default_factory=Permissions)


@dataclass(frozen=True)
class FilterCriteria:
    """Criteria for the payment list view.

    Every criterion is optional and they are combined with logical AND.
    Empty sets mean "no restriction". When ``include_paid`` is False, paid
    payments are removed before any other criterion is applied.
    """

    month: Optional[tuple[int, int]] = None
    check_number: Optional[str] = None
    banks: frozenset[str] = frozenset()
    companies: frozenset[str] = frozenset()
    business_groups: frozenset[str] = frozenset()
    description: Optional[str] = None
    amount: Optional[str] = None
    status: Optional[PaymentStatus] = None
    include_paid: bool = False


@dataclass(frozen=True)
class GroupTotal:
    """Sum of payment amounts for one group key."""

    key: str
    amount: float


@dataclass(frozen=True)
class TabularImportResult:
    """Outcome of parsing a spreadsheet before it is merged into the store."""

    drafts: tuple[PaymentDraft, ...]
    past_due_indices: tuple[int, ...]
    past_due_total: float
    total_amount: float
    rejected_rows: tuple[int, ...] = ()
    defaulted_date_rows: tuple[int, ...] = ()

    @property
    def has_past_due(self) -> bool:
        return bool(self.past_due_indices)


@dataclass(frozen=True)
class SummaryReport:
    """Totals and grouped totals shown by the summary view."""

    group_by: CategoryKind
    count: int
    total_amount: float
    paid_amount: float
    pending_amount: float
    month_total: float
    month_paid: float
    month_pending: float
    all_groups: tuple[GroupTotal, ...]
    paid_groups: tuple[GroupTotal, ...]
    pending_groups: tuple[GroupTotal, ...]
    month_groups: tuple[GroupTotal, ...]


@dataclass(frozen=True)
class CategoryItemStats:
    """Usage statistics of a single category item."""

    item: str
    usage: int
    total_amount: float
