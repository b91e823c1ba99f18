"""Per-view dashboard wiring: context, navigation and the host instance."""

from .context import AppContext, create_app_context
from .host import DashboardHost
from .navigation import PUBLIC_ROUTE, SIGN_IN_ROUTE, Navigator, RecordingNavigator

__all__ = [
    "AppContext",
    "DashboardHost",
    "Navigator",
    "PUBLIC_ROUTE",
    "RecordingNavigator",
    "SIGN_IN_ROUTE",
    "create_app_context",
]
