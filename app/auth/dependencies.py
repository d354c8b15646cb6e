"""FastAPI dependencies for authentication and RBAC."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from app.auth.security import decode_token
from app.auth.session import SessionContext, load_session_context
from app.auth.session_cache import is_token_revoked
from app.core.route_guard import GuardState, RouteGuard
from app.dependencies import AppSettings, RedisClient
from app.errors import AuthenticationError, AuthorizationError
from app.models.user import UserRole
from app.providers import ProfileRepo, RoleRepo
from app.schemas.auth import TokenUser

# Token issuance (sign-up / sign-in) is owned by the identity provider.
# The tokenUrl below is used only for Swagger UI's "Authorize" dialog.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/v1/token", auto_error=False)


async def _user_from_token(request: Request, token: str) -> tuple[TokenUser, dict]:
    try:
        payload = decode_token(token)
    except JWTError as exc:
        raise AuthenticationError("Invalid or expired token") from exc

    user_id: str | None = payload.get("sub")
    token_type: str | None = payload.get("type")
    if user_id is None or token_type != "access":
        raise AuthenticationError("Invalid or expired token")

    # Check Redis-backed deny-list for revoked tokens
    jti: str | None = payload.get("jti")
    if jti:
        redis = getattr(request.app.state, "redis", None)
        if redis and await is_token_revoked(redis, jti):
            raise AuthenticationError("Token has been revoked")

    user = TokenUser(
        id=user_id,
        email=payload.get("email", ""),
        username=payload.get("username", ""),
    )
    return user, payload


async def get_token_claims(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> dict:
    """Validated JWT claims for the caller."""
    if not token:
        raise AuthenticationError()
    _, payload = await _user_from_token(request, token)
    return payload


async def get_current_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> TokenUser:
    """Decode JWT, check deny-list, and return user from token claims."""
    if not token:
        raise AuthenticationError()
    user, _ = await _user_from_token(request, token)
    return user


async def get_optional_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> TokenUser | None:
    """Like :func:`get_current_user` but returns ``None`` instead of raising."""
    if not token:
        return None
    try:
        user, _ = await _user_from_token(request, token)
    except AuthenticationError:
        return None
    return user


# Convenience type aliases
CurrentUser = Annotated[TokenUser, Depends(get_current_user)]
OptionalUser = Annotated[TokenUser | None, Depends(get_optional_user)]
TokenClaims = Annotated[dict, Depends(get_token_claims)]


async def get_session_context(
    user: CurrentUser,
    profiles: ProfileRepo,
    roles: RoleRepo,
    redis: RedisClient,
    settings: AppSettings,
) -> SessionContext:
    """Load the caller's profile and authoritative role set."""
    return await load_session_context(
        user, profiles, roles, redis=redis, cache_ttl=settings.role_cache_ttl
    )


async def get_optional_session_context(
    user: OptionalUser,
    profiles: ProfileRepo,
    roles: RoleRepo,
    redis: RedisClient,
    settings: AppSettings,
) -> SessionContext | None:
    """Session context for the caller, or ``None`` when not signed in."""
    if user is None:
        return None
    return await load_session_context(
        user, profiles, roles, redis=redis, cache_ttl=settings.role_cache_ttl
    )


Session = Annotated[SessionContext, Depends(get_session_context)]
OptionalSession = Annotated[SessionContext | None, Depends(get_optional_session_context)]


def get_route_guard(settings: AppSettings) -> RouteGuard:
    return RouteGuard(login_path=settings.login_path, denied_mode=settings.guard_denied_mode)


Guard = Annotated[RouteGuard, Depends(get_route_guard)]


def require_role(*allowed_roles: str | UserRole):
    """Dependency factory that enforces role-based access.

    Roles come from the session's role set, never from token claims. With
    no arguments it only requires an authenticated session.

    Usage:
        @router.put("/users/{id}/role", dependencies=[Depends(require_role("admin"))])
    """
    allowed = tuple(UserRole(r) for r in allowed_roles)

    async def _check_role(ctx: Session, guard: Guard) -> SessionContext:
        # Denied mode only shapes the decision body; the state is what counts
        decision = guard.evaluate(ctx.guard_resolver, allowed)
        if decision.state == GuardState.UNAUTHENTICATED:
            raise AuthenticationError(decision.message or "Please sign in to continue")
        if decision.state == GuardState.AUTHENTICATED_UNAUTHORIZED:
            raise AuthorizationError(
                "Insufficient permissions",
                required_roles=decision.required_roles,
                current_role=decision.current_role,
            )
        return ctx

    return _check_role
