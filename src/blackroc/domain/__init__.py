"""Domain types for the dashboard core."""

from .identity import Identity
from .outcomes import Created, Failed, Found, NotFound, PermissionDenied, Updated
from .profile import CustomerProfile, ProfileDraft
from .stats import DashboardSnapshot, DashboardStats, OrderSummary, QuoteSummary, RecordKind

__all__ = [
    "Created",
    "CustomerProfile",
    "DashboardSnapshot",
    "DashboardStats",
    "Failed",
    "Found",
    "Identity",
    "NotFound",
    "OrderSummary",
    "PermissionDenied",
    "ProfileDraft",
    "QuoteSummary",
    "RecordKind",
    "Updated",
]
