"""Route guarding for protected application views.

Each navigation is evaluated once into a :class:`GuardDecision`::

    LOADING                     session or roles still being fetched
    UNAUTHENTICATED             no session (or roles failed to load) -> login
    AUTHENTICATED_AUTHORIZED    render the view
    AUTHENTICATED_UNAUTHORIZED  redirect to the role's landing page, or deny
    PUBLIC                      page not in the route table; render for anyone

There is no retry inside an evaluation. A role set that failed to load is
treated like a missing session, so protected content is never rendered on
the strength of partial data.

Usage::

    guard = RouteGuard(login_path="/login")
    decision = guard.evaluate(ctx.resolver, allowed_roles=guard.allowed_roles_for("/admin"))
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal

from app.core.role_resolver import RoleResolver
from app.models.user import UserRole

logger = logging.getLogger(__name__)


class GuardState(StrEnum):
    """Outcome of a single guard evaluation."""

    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED_AUTHORIZED = "authenticated_authorized"
    AUTHENTICATED_UNAUTHORIZED = "authenticated_unauthorized"
    PUBLIC = "public"


@dataclass(frozen=True)
class GuardDecision:
    """What the client should do for one navigation."""

    state: GuardState
    render: bool = False
    redirect_to: str | None = None
    access_denied: bool = False
    required_roles: list[str] = field(default_factory=list)
    current_role: str | None = None
    message: str | None = None


# Landing page per primary role when an authenticated user hits a page
# they may not see.
ROLE_LANDING_PAGES: dict[UserRole, str] = {
    UserRole.admin: "/admin",
    UserRole.landlord: "/landlord",
}
DEFAULT_LANDING_PAGE = "/"

# Home ("/") redirect targets for a signed-in user.
ROLE_HOME_PAGES: dict[UserRole, str] = {
    UserRole.admin: "/admin",
    UserRole.landlord: "/landlord",
    UserRole.renter: "/renter",
}
ANONYMOUS_HOME_PAGE = "/landing"

# Application routes and who may see them. ``()`` means any signed-in user;
# paths not listed here are public.
PROTECTED_ROUTES: dict[str, tuple[UserRole, ...]] = {
    "/renter": (),
    "/my-applications": (),
    "/saved-properties": (),
    "/messages": (),
    "/payment/:applicationId": (),
    "/payment-success/:applicationId": (),
    "/property/:id": (),
    "/property/:id/chat": (),
    "/account": (),
    "/landlord": (UserRole.landlord,),
    "/landlord/properties": (UserRole.landlord,),
    "/landlord/new": (UserRole.landlord,),
    "/landlord/edit/:id": (UserRole.landlord,),
    "/landlord/applications": (UserRole.landlord,),
    "/analytics": (UserRole.landlord,),
    "/admin": (UserRole.admin,),
    "/admin/properties": (UserRole.admin,),
    "/admin/database": (UserRole.admin,),
    "/admin/settings": (UserRole.admin,),
}


def _segments(path: str) -> list[str]:
    return [s for s in path.split("?", 1)[0].strip("/").split("/") if s]


def _matches(pattern: str, path: str) -> bool:
    pattern_parts = _segments(pattern)
    path_parts = _segments(path)
    if len(pattern_parts) != len(path_parts):
        return False
    # Client routing ignores case, so "/Admin" is the admin view
    return all(
        p.startswith(":") or p.lower() == s.lower() for p, s in zip(pattern_parts, path_parts)
    )


def match_route(path: str) -> tuple[str, tuple[UserRole, ...]] | None:
    """Return ``(pattern, allowed_roles)`` for *path*, or ``None`` if public."""
    for pattern, roles in PROTECTED_ROUTES.items():
        if _matches(pattern, path):
            return pattern, roles
    return None


def landing_page_for(role: UserRole | None) -> str:
    """Landing page used when a user is turned away from a view."""
    if role is None:
        return DEFAULT_LANDING_PAGE
    return ROLE_LANDING_PAGES.get(role, DEFAULT_LANDING_PAGE)


class RouteGuard:
    """Evaluates navigations against the allowed-role list of a view."""

    def __init__(
        self,
        login_path: str = "/login",
        denied_mode: Literal["redirect", "deny"] = "redirect",
    ):
        self.login_path = login_path
        self.denied_mode = denied_mode

    @staticmethod
    def allowed_roles_for(path: str) -> tuple[UserRole, ...] | None:
        """Allowed roles for *path*; ``None`` when the path is public."""
        matched = match_route(path)
        return None if matched is None else matched[1]

    def evaluate(
        self,
        resolver: RoleResolver | None,
        allowed_roles: Sequence[str | UserRole] | None = None,
        *,
        loading: bool = False,
    ) -> GuardDecision:
        """Decide whether to render, redirect, or deny.

        Args:
            resolver: Roles for the session, ``None`` when there is no session.
            allowed_roles: Roles permitted to view the page. ``None`` or empty
                means any authenticated user.
            loading: The session or role fetch has not completed yet.
        """
        if loading:
            return GuardDecision(state=GuardState.LOADING)

        if resolver is None or resolver.load_failed:
            if resolver is not None:
                logger.warning("Role data unavailable; treating session as unauthenticated")
            return GuardDecision(
                state=GuardState.UNAUTHENTICATED,
                redirect_to=self.login_path,
                message="Please sign in to continue",
            )

        required = [UserRole(r).value for r in allowed_roles or ()]
        if not required or resolver.has_any_role(required):
            return GuardDecision(
                state=GuardState.AUTHENTICATED_AUTHORIZED,
                render=True,
                required_roles=required,
                current_role=resolver.primary_role.value,
            )

        highest = resolver.highest_role()
        current = highest.value if highest else None
        message = (
            f"This page requires one of: {', '.join(required)}. "
            f"Your current role: {current or 'none'}"
        )
        if self.denied_mode == "deny":
            return GuardDecision(
                state=GuardState.AUTHENTICATED_UNAUTHORIZED,
                access_denied=True,
                required_roles=required,
                current_role=current,
                message=message,
            )
        return GuardDecision(
            state=GuardState.AUTHENTICATED_UNAUTHORIZED,
            redirect_to=landing_page_for(highest),
            required_roles=required,
            current_role=current,
            message=message,
        )

    def evaluate_path(
        self, resolver: RoleResolver | None, path: str, *, loading: bool = False
    ) -> GuardDecision:
        """Evaluate a navigation to *path* using the route table."""
        allowed = self.allowed_roles_for(path)
        if allowed is None and not loading:
            return GuardDecision(state=GuardState.PUBLIC, render=True)
        return self.evaluate(resolver, allowed, loading=loading)

    def home(self, resolver: RoleResolver | None) -> GuardDecision:
        """Where ``/`` sends a visitor."""
        if resolver is None or resolver.load_failed:
            return GuardDecision(
                state=GuardState.UNAUTHENTICATED, redirect_to=ANONYMOUS_HOME_PAGE
            )
        highest = resolver.highest_role()
        if highest is None:
            return GuardDecision(
                state=GuardState.AUTHENTICATED_UNAUTHORIZED,
                access_denied=True,
                message=(
                    "Your account does not have a valid role assigned. "
                    "Please contact support."
                ),
            )
        return GuardDecision(
            state=GuardState.AUTHENTICATED_AUTHORIZED,
            redirect_to=ROLE_HOME_PAGES[highest],
            current_role=highest.value,
        )