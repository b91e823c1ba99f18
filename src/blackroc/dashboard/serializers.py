"""Plain-dict views of dashboard state for JSON responses and the CLI."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Optional

from ..domain.profile import CustomerProfile
from ..domain.stats import DashboardSnapshot
from ..services.profile_controller import ProfileController
from .host import DashboardHost


def profile_to_dict(profile: Optional[CustomerProfile]) -> Optional[dict[str, Any]]:
    return asdict(profile) if profile is not None else None


def controller_to_dict(controller: Optional[ProfileController]) -> Optional[dict[str, Any]]:
    if controller is None:
        return None
    error = controller.error
    return {
        "state": controller.state.value,
        "form_visible": controller.form_visible,
        "profile": profile_to_dict(controller.profile),
        "draft": controller.draft.as_record() if controller.draft is not None else None,
        "error": (
            {"kind": error.kind.value, "message": error.message, "fields": list(error.fields)}
            if error is not None
            else None
        ),
    }


def snapshot_to_dict(snapshot: Optional[DashboardSnapshot]) -> Optional[dict[str, Any]]:
    if snapshot is None:
        return None
    stats = snapshot.stats
    return {
        "stats": {
            "total_quotes": stats.total_quotes,
            "total_orders": stats.total_orders,
            "pending_orders": stats.pending_orders,
            "pending_deliveries": stats.pending_deliveries,
            "outstanding_balance": str(stats.outstanding_balance),
        },
        "recent_quotes": [
            {
                "id": quote.id,
                "quote_number": quote.quote_number,
                "status": quote.status_group,
                "created_at": quote.created_at.isoformat(),
            }
            for quote in snapshot.recent_quotes
        ],
        "recent_orders": [
            {
                "id": order.id,
                "order_number": order.order_number,
                "payment_status": order.payment_status,
                "delivery_status": order.delivery_status,
                "created_at": order.created_at.isoformat(),
            }
            for order in snapshot.recent_orders
        ],
        "degraded": snapshot.degraded,
    }


def host_to_dict(host: DashboardHost) -> dict[str, Any]:
    identity = host.identity
    return {
        "identity": {"id": identity.id, "email": identity.email} if identity else None,
        "profile": controller_to_dict(host.profile),
        "dashboard": snapshot_to_dict(host.snapshot),
    }
