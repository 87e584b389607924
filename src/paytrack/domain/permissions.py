"""Permission checks for mutating operations."""

from paytrack.domain.entities import PERMISSION_NAMES, User
from paytrack.domain.errors import PermissionDenied


def require_permission(user: User, permission: str) -> None:
    """Refuse the operation unless the user holds the permission flag.

    Raises:
        PermissionDenied: If the flag is not set
    """
    if permission not in PERMISSION_NAMES:
        raise ValueError(f"Unknown permission '{permission}'")
    if not getattr(user.permissions, permission):
        raise PermissionDenied(permission)
