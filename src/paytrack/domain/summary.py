"""Filtering and summary grouping domain service."""

from datetime import date
from typing import Callable, Iterable, Optional, Sequence

from paytrack.domain.entities import (
    CategoryKind,
    FilterCriteria,
    GroupTotal,
    Payment,
    PaymentStatus,
    SummaryReport,
)
from paytrack.domain.state import AppState
from paytrack.utils.amount_parser import amount_to_text
from paytrack.utils.date_parser import same_month


def _contains(haystack: str, needle: Optional[str]) -> bool:
    return not needle or needle.casefold() in haystack.casefold()


def matches(payment: Payment, criteria: FilterCriteria) -> bool:
    """Return True when a payment satisfies every criterion."""
    if not criteria.include_paid and payment.is_paid:
        return False

    if criteria.month is not None and not same_month(payment.due_date, *criteria.month):
        return False
    if not _contains(payment.check_number, criteria.check_number):
        return False
    if criteria.banks and payment.bank not in criteria.banks:
        return False
    if criteria.companies and payment.company not in criteria.companies:
        return False
    if criteria.business_groups and payment.business_group not in criteria.business_groups:
        return False
    if not _contains(payment.description, criteria.description):
        return False
    if criteria.amount and criteria.amount not in amount_to_text(payment.amount):
        return False
    if criteria.status is not None and payment.status is not PaymentStatus(criteria.status):
        return False
    return True


def filter_payments(payments: Iterable[Payment], criteria: FilterCriteria) -> list[Payment]:
    """Return the payments matching the criteria, in store order."""
    return [payment for payment in payments if matches(payment, criteria)]


def total_amount(payments: Iterable[Payment]) -> float:
    return sum((payment.amount for payment in payments), 0.0)


def group_totals(
    payments: Iterable[Payment], key_fn: Callable[[Payment], str]
) -> list[GroupTotal]:
    """Sum amounts per group key, largest sum first.

    Groups with equal sums keep the order in which their key was first seen.
    """
    sums: dict[str, float] = {}
    for payment in payments:
        key = key_fn(payment)
        sums[key] = sums.get(key, 0.0) + payment.amount

    ordered = sorted(sums.items(), key=lambda item: -item[1])
    return [GroupTotal(key=key, amount=amount) for key, amount in ordered]


class SummaryService:
    """Service for building filtered views and summary reports."""

    def __init__(self, state: AppState):
        """Initialize summary service.

        Args:
            state: Application state holding the payment store
        """
        self.state = state

    def filtered_view(self, criteria: FilterCriteria) -> tuple[list[Payment], float]:
        """Return the filtered payments and their total amount."""
        payments = filter_payments(self.state.payments, criteria)
        return payments, total_amount(payments)

    def build_report(
        self,
        today: Optional[date] = None,
        group_by: CategoryKind = CategoryKind.BANK,
        payments: Optional[Sequence[Payment]] = None,
    ) -> SummaryReport:
        """Build totals and grouped totals for the summary view.

        Args:
            today: Reference date for the current-month figures
            group_by: Category dimension to group by
            payments: Payments to summarise; defaults to the whole store
        """
        today = today or date.today()
        if payments is None:
            payments = self.state.payments
        kind = CategoryKind(group_by)

        def key_fn(payment: Payment) -> str:
            return payment.category_value(kind)

        paid = [p for p in payments if p.is_paid]
        pending = [p for p in payments if not p.is_paid]
        month = [p for p in payments if same_month(p.due_date, today.year, today.month)]
        month_paid = [p for p in month if p.is_paid]

        total = total_amount(payments)
        paid_total = total_amount(paid)
        month_total = total_amount(month)
        month_paid_total = total_amount(month_paid)

        return SummaryReport(
            group_by=kind,
            count=len(payments),
            total_amount=total,
            paid_amount=paid_total,
            pending_amount=total - paid_total,
            month_total=month_total,
            month_paid=month_paid_total,
            month_pending=month_total - month_paid_total,
            all_groups=tuple(group_totals(payments, key_fn)),
            paid_groups=tuple(group_totals(paid, key_fn)),
            pending_groups=tuple(group_totals(pending, key_fn)),
            month_groups=tuple(group_totals(month, key_fn)),
        )
