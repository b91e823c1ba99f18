"""Repository protocols consumed by the dashboard services."""

from .dashboard import DashboardQueries
from .profile import ProfileRepository

__all__ = ["DashboardQueries", "ProfileRepository"]
