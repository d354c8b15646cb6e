"""Declarative query filters (fastapi-filter)."""

from .profile import ProfileFilter

__all__ = ["ProfileFilter"]
