"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the storage schema can change
without touching the domain entities.
"""

from paytrack.domain import entities as domain
from paytrack.database.models import (
    Payment as ORMPayment,
    User as ORMUser,
)


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    return domain.Payment(
        id=orm_payment.id,
        due_date=orm_payment.due_date,
        check_number=orm_payment.check_number,
        bank=orm_payment.bank,
        company=orm_payment.company,
        business_group=orm_payment.business_group,
        description=orm_payment.description or "",
        amount=float(orm_payment.amount),
        status=domain.PaymentStatus(orm_payment.status),
    )


def payment_to_orm(payment: domain.Payment, position: int) -> ORMPayment:
    """Convert domain Payment entity to a new SQLAlchemy Payment row."""
    return ORMPayment(
        id=payment.id,
        position=position,
        due_date=payment.due_date,
        check_number=payment.check_number,
        bank=payment.bank,
        company=payment.company,
        business_group=payment.business_group,
        description=payment.description,
        amount=payment.amount,
        status=payment.status.value,
    )


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        username=orm_user.username,
        password_hash=orm_user.password_hash,
        permissions=domain.Permissions(
            add=orm_user.can_add,
            edit=orm_user.can_edit,
            delete=orm_user.can_delete,
            change_status=orm_user.can_change_status,
            manage_categories=orm_user.can_manage_categories,
            manage_users=orm_user.can_manage_users,
        ),
    )


def user_to_orm(user: domain.User, position: int) -> ORMUser:
    """Convert domain User entity to a new SQLAlchemy User row."""
    permissions = user.permissions
    return ORMUser(
        id=user.id,
        position=position,
        username=user.username,
        password_hash=user.password_hash,
        can_add=permissions.add,
        can_edit=permissions.edit,
        can_delete=permissions.delete,
        can_change_status=permissions.change_status,
        can_manage_categories=permissions.manage_categories,
        can_manage_users=permissions.manage_users,
    )
