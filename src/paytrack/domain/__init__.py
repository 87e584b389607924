"""Domain layer for paytrack application."""

from paytrack.domain.state import AppState
from paytrack.domain.payment import PaymentService
from paytrack.domain.category import CategoryService
from paytrack.domain.user import UserService
from paytrack.domain.tabular_import import TabularImportService
from paytrack.domain.backup import BackupService
from paytrack.domain.summary import SummaryService

__all__ = [
    "AppState",
    "PaymentService",
    "CategoryService",
    "UserService",
    "TabularImportService",
    "BackupService",
    "SummaryService",
]
