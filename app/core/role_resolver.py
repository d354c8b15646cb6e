"""Answers role questions for one session from already-loaded role data.

The resolver never performs I/O. Loading the role set is the job of
:mod:`app.auth.session`; the result is handed to the resolver, which only
ever trusts the authoritative ``user_roles`` set. The profile's denormalized
``role`` column is carried for display but is never consulted for a
permission check, so a user whose role set is empty holds no roles even if
their profile still says ``admin``.
"""

from collections.abc import Iterable

from app.models.user import DEFAULT_ROLE, ROLE_PRIORITY, UserRole


def _parse_roles(raw: Iterable[str]) -> frozenset[UserRole]:
    roles = set()
    for value in raw:
        try:
            roles.add(UserRole(value))
        except ValueError:
            continue  # unknown role names grant nothing
    return frozenset(roles)


class RoleResolver:
    """Immutable view over the roles a user holds."""

    __slots__ = ("_roles", "profile_role", "load_failed")

    def __init__(
        self,
        roles: Iterable[str] = (),
        profile_role: str | None = None,
        *,
        load_failed: bool = False,
    ):
        self._roles = frozenset() if load_failed else _parse_roles(roles)
        self.profile_role = profile_role
        self.load_failed = load_failed

    @classmethod
    def unavailable(cls) -> "RoleResolver":
        """Resolver for a session whose role data could not be loaded."""
        return cls(load_failed=True)

    @property
    def roles(self) -> frozenset[UserRole]:
        return self._roles

    def has_role(self, role: str | UserRole) -> bool:
        """True iff *role* is in the loaded role set."""
        try:
            return UserRole(role) in self._roles
        except ValueError:
            return False

    def has_any_role(self, roles: Iterable[str | UserRole]) -> bool:
        return any(self.has_role(r) for r in roles)

    def has_valid_role(self) -> bool:
        return bool(self._roles)

    def highest_role(self) -> UserRole | None:
        """Highest-priority held role, or ``None`` when nothing is held."""
        for role in ROLE_PRIORITY:
            if role in self._roles:
                return role
        return None

    @property
    def primary_role(self) -> UserRole:
        """Highest-priority held role, defaulting to renter."""
        return self.highest_role() or DEFAULT_ROLE

    def sorted_roles(self) -> list[UserRole]:
        """Held roles in priority order."""
        return [r for r in ROLE_PRIORITY if r in self._roles]

    def __repr__(self) -> str:
        held = ",".join(r.value for r in self.sorted_roles()) or "-"
        return f"<RoleResolver roles={held} load_failed={self.load_failed}>"
