"""Service module exports."""

from . import (
    aggregation,
    auth,
    demo_seed,
    notifications,
    profile_controller,
    retry,
    session_gate,
)

__all__ = [
    "aggregation",
    "auth",
    "demo_seed",
    "notifications",
    "profile_controller",
    "retry",
    "session_gate",
]
