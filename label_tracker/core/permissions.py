"""
Role-based access policy.

Admins manage orders, users and workstations; operators only process
labels. Every check takes the request-scoped actor explicitly.
"""

from label_tracker.core.exceptions import PermissionDeniedError
from label_tracker.models.user import User


def ensure_active(actor: User) -> User:
    """Reject missing or deactivated accounts; returns the actor for chaining."""
    if actor is None or not actor.is_active:
        raise PermissionDeniedError()
    return actor


def ensure_admin(actor: User) -> User:
    ensure_active(actor)
    if not actor.role.is_admin:
        raise PermissionDeniedError()
    return actor
