"""Allow-list of role changes.

Advisory only: the admin API reports whether a change is on the list but an
admin may still apply it. Nothing here is enforced by the database.
"""

from app.errors import ValidationError
from app.models.user import UserRole

ALLOWED_ROLE_TRANSITIONS: dict[UserRole, frozenset[UserRole]] = {
    UserRole.admin: frozenset({UserRole.admin, UserRole.landlord, UserRole.renter}),
    UserRole.landlord: frozenset({UserRole.landlord, UserRole.renter}),
    UserRole.renter: frozenset({UserRole.renter}),
}


def validate_role_transition(current_role: str | UserRole, new_role: str | UserRole) -> bool:
    """Return ``True`` if moving from *current_role* to *new_role* is on the allow-list."""
    try:
        current = UserRole(current_role)
        target = UserRole(new_role)
    except ValueError:
        return False
    return target in ALLOWED_ROLE_TRANSITIONS.get(current, frozenset())


def ensure_role_transition(current_role: str | UserRole, new_role: str | UserRole) -> None:
    """Raise ``ValidationError`` if the transition is not on the allow-list."""
    if not validate_role_transition(current_role, new_role):
        raise ValidationError(
            f"Cannot change role from '{current_role}' to '{new_role}'",
            field="role",
        )
