"""Authentication API endpoints.

Token issuance (sign-up / sign-in / refresh) is handled by the identity
provider. This service validates tokens statelessly via the shared JWT
secret and resolves roles from its own role table.
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status

from app.auth.dependencies import Session, TokenClaims
from app.auth.security import seconds_until_expiry
from app.auth.session_cache import clear_cached_roles, revoke_token
from app.dependencies import RedisClient
from app.errors import DataAccessError
from app.providers import ProfileSvc
from app.rate_limit import limiter
from app.schemas.auth import LogoutResponse, MeResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=MeResponse)
@limiter.limit("30/minute")
async def get_current_user_info(request: Request, ctx: Session) -> MeResponse:
    """Return the caller's profile and the roles they hold."""
    if ctx.resolver.load_failed:
        raise DataAccessError()
    if ctx.profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return MeResponse(
        id=ctx.profile.id,
        email=ctx.profile.email,
        full_name=ctx.profile.full_name,
        status=ctx.profile.status,
        profile_role=ctx.profile.role,
        roles=[r.value for r in ctx.resolver.sorted_roles()],
        primary_role=ctx.resolver.primary_role.value,
    )


@router.post("/signed-in", status_code=status.HTTP_204_NO_CONTENT)
async def record_sign_in(ctx: Session, service: ProfileSvc) -> None:
    """Stamp the caller's last sign-in time after a successful sign-in."""
    if ctx.profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    await service.record_sign_in(ctx.profile.id)


@router.post("/logout", response_model=LogoutResponse)
async def logout(claims: TokenClaims, redis: RedisClient) -> LogoutResponse:
    """Revoke the presented token and drop the caller's cached roles."""
    jti = claims.get("jti")
    revoked = False
    if redis is not None and jti:
        await revoke_token(redis, jti, seconds_until_expiry(claims))
        revoked = True
    await clear_cached_roles(redis, claims["sub"])
    logger.info("User %s signed out (revoked=%s)", claims["sub"], revoked)
    return LogoutResponse(revoked=revoked)
