"""Payment domain service."""

import dataclasses
import logging
import uuid
from datetime import date
from typing import Iterable, Optional

from paytrack.domain.entities import Payment, PaymentStatus, User
from paytrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_payment_id,
    payment_not_found,
)
from paytrack.domain.permissions import require_permission
from paytrack.domain.state import AppState
from paytrack.domain.user import UserService
from paytrack.utils.amount_parser import is_valid_amount

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {
    "due_date",
    "check_number",
    "bank",
    "company",
    "business_group",
    "description",
    "amount",
}


class PaymentService:
    """Service for managing the payment store."""

    def __init__(self, state: AppState, actor: User):
        """Initialize payment service.

        Args:
            state: Application state holding the payment store
            actor: Logged-in user whose permissions gate every mutation
        """
        self.state = state
        self.actor = actor

    def list_payments(self) -> list[Payment]:
        return list(self.state.payments)

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        for payment in self.state.payments:
            if payment.id == payment_id:
                return payment
        return None

    def require_payment(self, payment_id: str) -> Payment:
        """Get a payment by ID or its unique ID prefix.

        Raises:
            NotFoundError: If no payment, or more than one, matches
        """
        payment = self.get_payment(payment_id)
        if payment is not None:
            return payment

        matches = [p for p in self.state.payments if p.id.startswith(payment_id)]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            raise NotFoundError(f"Payment id prefix '{payment_id}' is ambiguous")
        raise NotFoundError(payment_not_found(payment_id))

    def create_payment(
        self,
        due_date: date,
        check_number: str,
        bank: str,
        company: str,
        business_group: str,
        amount: float,
        description: str = "",
    ) -> Payment:
        """Create a payment. New payments always start as pending.

        Raises:
            PermissionDenied: If the actor may not add payments
            ValidationError: If a required field is empty or amount is not positive
        """
        require_permission(self.actor, "add")
        payment = Payment(
            id=str(uuid.uuid4()),
            due_date=due_date,
            check_number=check_number.strip(),
            bank=bank,
            company=company,
            business_group=business_group,
            description=(description or "").strip(),
            amount=float(amount),
            status=PaymentStatus.PENDING,
        )
        self._validate(payment)
        self.state.payments.append(payment)
        logger.info("Created payment %s (%s)", payment.id, payment.check_number)
        return payment

    def update_payment(self, payment_id: str, **changes) -> Payment:
        """Replace payment fields, keeping its ID and status.

        Raises:
            PermissionDenied: If the actor may not edit payments
            NotFoundError: If the payment doesn't exist
            ValidationError: If an unknown field is given or the result is invalid
        """
        require_permission(self.actor, "edit")
        payment = self.require_payment(payment_id)

        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        if "amount" in changes:
            changes["amount"] = float(changes["amount"])

        updated = dataclasses.replace(payment, **changes)
        self._validate(updated)
        self._replace(updated)
        return updated

    def set_status(self, payment_id: str, status: PaymentStatus) -> Payment:
        """Set the status of a payment."""
        require_permission(self.actor, "change_status")
        payment = self.require_payment(payment_id)
        updated = dataclasses.replace(payment, status=PaymentStatus(status))
        self._replace(updated)
        return updated

    def toggle_status(self, payment_id: str) -> Payment:
        """Flip a payment between pending and paid."""
        payment = self.require_payment(payment_id)
        new_status = PaymentStatus.PENDING if payment.is_paid else PaymentStatus.PAID
        return self.set_status(payment.id, new_status)

    def delete_payment(self, payment_id: str) -> Payment:
        """Remove a payment from the store."""
        require_permission(self.actor, "delete")
        payment = self.require_payment(payment_id)
        self.state.payments = [p for p in self.state.payments if p.id != payment.id]
        logger.info("Deleted payment %s", payment.id)
        return payment

    def import_payments(self, payments: Iterable[Payment]) -> int:
        """Append imported payments to the store.

        Returns:
            Number of payments added

        Raises:
            PermissionDenied: If the actor may not add payments
            ConflictError: If an imported ID is already in the store
        """
        require_permission(self.actor, "add")
        incoming = list(payments)
        existing_ids = {p.id for p in self.state.payments}
        for payment in incoming:
            if payment.id in existing_ids:
                raise ConflictError(duplicate_payment_id(payment.id))
            existing_ids.add(payment.id)

        self.state.payments.extend(incoming)
        logger.info("Imported %d payment(s)", len(incoming))
        return len(incoming)

    def restore_payments(self, payments: Iterable[Payment]) -> int:
        """Replace the whole payment store with a restored snapshot."""
        require_permission(self.actor, "add")
        restored = list(payments)
        self.state.payments = restored
        logger.info("Restored %d payment(s) from backup", len(restored))
        return len(restored)

    def clear_payments(self, password: str) -> int:
        """Remove every payment after confirming the actor's password.

        Returns:
            Number of payments removed

        Raises:
            ValidationError: If the password is wrong
        """
        if not UserService(self.state, self.actor).verify_actor_password(password):
            raise ValidationError("Invalid password")
        removed = len(self.state.payments)
        self.state.payments = []
        logger.info("Cleared %d payment(s)", removed)
        return removed

    def _validate(self, payment: Payment) -> None:
        missing = [
            name
            for name in ("check_number", "bank", "company", "business_group")
            if not getattr(payment, name)
        ]
        if missing:
            raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
        if not is_valid_amount(payment.amount):
            raise ValidationError("Amount must be a positive number")

    def _replace(self, updated: Payment) -> None:
        self.state.payments = [
            updated if p.id == updated.id else p for p in self.state.payments
        ]
