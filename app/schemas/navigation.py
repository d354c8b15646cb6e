"""Pydantic schemas for route-guard decisions."""

from pydantic import BaseModel

from app.core.route_guard import GuardState


class GuardDecisionResponse(BaseModel):
    """What the client should do when navigating to a page."""

    path: str
    state: GuardState
    render: bool
    redirect_to: str | None = None
    access_denied: bool = False
    required_roles: list[str] = []
    current_role: str | None = None
    message: str | None = None

    model_config = {"from_attributes": True}
