"""Declarative filter for profiles."""

from typing import Optional

from fastapi_filter.contrib.sqlalchemy import Filter

from app.models.profile import Profile


class ProfileFilter(Filter):
    """Query-param filter for the ``GET /admin/users`` endpoint."""

    role: Optional[str] = None
    status: Optional[str] = None
    email__ilike: Optional[str] = None
    order_by: Optional[list[str]] = None

    class Constants(Filter.Constants):
        model = Profile
