"""Core business logic."""
from app.core.role_resolver import RoleResolver
from app.core.role_transitions import validate_role_transition
from app.core.route_guard import GuardDecision, GuardState, RouteGuard

__all__ = [
    "GuardDecision",
    "GuardState",
    "RoleResolver",
    "RouteGuard",
    "validate_role_transition",
]
