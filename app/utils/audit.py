"""Audit logging for privileged admin actions."""

import logging

from fastapi import Request

from app.auth.dependencies import CurrentUser

logger = logging.getLogger("audit")


def audit_logged(action: str):
    """Dependency factory that logs privileged actions.

    The acting user's roles are checked separately by ``require_role``; this
    only records who did what.

    Usage::

        @router.put("/users/{user_id}/role", dependencies=[Depends(audit_logged("assign_role"))])
    """

    async def _log(request: Request, current_user: CurrentUser) -> None:
        client_ip = request.client.host if request.client else "unknown"
        request_id = getattr(request.state, "request_id", "n/a")
        logger.info(
            "AUDIT action=%s user=%s email=%s ip=%s request_id=%s method=%s path=%s",
            action,
            current_user.id,
            current_user.email,
            client_ip,
            request_id,
            request.method,
            request.url.path,
        )

    return _log
