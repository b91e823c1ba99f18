"""Blueprint exports."""

from . import auth, dashboard

__all__ = ["auth", "dashboard"]
