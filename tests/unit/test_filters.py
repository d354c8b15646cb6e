"""Unit tests for declarative fastapi-filter classes."""

from sqlalchemy import select

from app.filters.profile import ProfileFilter
from app.models.profile import Profile


def _compile(query) -> str:
    """Compile a SQLAlchemy query to a string for inspection."""
    return str(query.compile(compile_kwargs={"literal_binds": True}))


class TestProfileFilter:
    def test_defaults_are_none(self):
        f = ProfileFilter()
        assert f.role is None
        assert f.status is None
        assert f.email__ilike is None

    def test_no_filters_no_where(self):
        compiled = _compile(ProfileFilter().filter(select(Profile)))
        assert "WHERE" not in compiled

    def test_filter_by_status(self):
        compiled = _compile(ProfileFilter(status="suspended").filter(select(Profile)))
        assert "WHERE" in compiled
        assert "suspended" in compiled

    def test_filter_by_role(self):
        compiled = _compile(ProfileFilter(role="landlord").filter(select(Profile)))
        assert "landlord" in compiled

    def test_email_ilike(self):
        compiled = _compile(ProfileFilter(email__ilike="%@example.com").filter(select(Profile)))
        assert "lower" in compiled.lower() or "ilike" in compiled.lower()

    def test_order_by(self):
        compiled = _compile(ProfileFilter(order_by=["-created_at"]).sort(select(Profile)))
        assert "ORDER BY" in compiled
        assert "DESC" in compiled
