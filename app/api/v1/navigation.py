"""Navigation endpoints: route-guard decisions for the client."""

from fastapi import APIRouter, Query

from app.auth.dependencies import Guard, OptionalSession
from app.core.route_guard import GuardDecision
from app.schemas.navigation import GuardDecisionResponse

router = APIRouter()


def _to_response(path: str, decision: GuardDecision) -> GuardDecisionResponse:
    return GuardDecisionResponse(
        path=path,
        state=decision.state,
        render=decision.render,
        redirect_to=decision.redirect_to,
        access_denied=decision.access_denied,
        required_roles=list(decision.required_roles),
        current_role=decision.current_role,
        message=decision.message,
    )


@router.get("/guard", response_model=GuardDecisionResponse)
async def guard_path(
    ctx: OptionalSession,
    guard: Guard,
    path: str = Query(..., min_length=1, description="Application path, e.g. /landlord/new"),
) -> GuardDecisionResponse:
    """
    Decide whether the caller may view *path*.

    Anonymous callers and callers whose roles could not be loaded are sent
    to the login page for protected paths.
    """
    resolver = ctx.guard_resolver if ctx is not None else None
    return _to_response(path, guard.evaluate_path(resolver, path))


@router.get("/home", response_model=GuardDecisionResponse)
async def home(ctx: OptionalSession, guard: Guard) -> GuardDecisionResponse:
    """Where ``/`` should send the caller."""
    resolver = ctx.guard_resolver if ctx is not None else None
    return _to_response("/", guard.home(resolver))
