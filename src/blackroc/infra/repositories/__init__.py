"""SQLModel repository implementations."""

from .dashboard import SQLModelDashboardQueries
from .profile import SQLModelProfileRepository

__all__ = ["SQLModelDashboardQueries", "SQLModelProfileRepository"]
