"""Dashboard routes: overview plus onboarding and edit-profile submissions."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Optional

from flask import jsonify, redirect, request

from ...dashboard.host import DashboardHost
from ...dashboard.navigation import SIGN_IN_ROUTE, RecordingNavigator
from ...dashboard.serializers import host_to_dict
from ...domain.profile import PROFILE_FIELDS
from ...errors import ErrorKind
from ...extensions import get_context
from ...services.notifications import NotificationQueue
from ...services.profile_controller import ProfileController, ProfileState
from . import bp

HostAction = Callable[[DashboardHost], Awaitable[None]]

_ERROR_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.PERMISSION_DENIED: 403,
    ErrorKind.NOT_FOUND: 404,
}


def _payload() -> Mapping[str, Any]:
    return request.get_json(silent=True) or request.form


def _apply_fields(controller: ProfileController, data: Mapping[str, Any]) -> None:
    for name in PROFILE_FIELDS:
        if name in data:
            controller.update_field(name, data[name])


def _render(action: Optional[HostAction] = None):
    """Mount a host for this request, optionally run ``action``, and respond."""

    ctx = get_context()
    navigator = RecordingNavigator()
    notifier = NotificationQueue(maxlen=ctx.config.NOTIFICATION_QUEUE_SIZE)
    host = DashboardHost.from_context(ctx, navigator, notifier)

    async def _flow() -> bool:
        if not await host.mount():
            return False
        if action is not None:
            await action(host)
        return True

    try:
        mounted = asyncio.run(_flow())
    finally:
        host.teardown()
    if not mounted:
        return redirect(navigator.target or SIGN_IN_ROUTE)

    body = host_to_dict(host)
    body["notifications"] = [n.to_dict() for n in notifier.drain()]
    status = 200
    error = host.profile.error if action is not None else None
    if error is not None:
        status = _ERROR_STATUS.get(error.kind, 503)
    return jsonify(body), status


@bp.get("/")
def index():
    """Dashboard overview: profile state and statistics snapshot."""

    return _render()


@bp.post("/profile")
def create_profile():
    """Submit the onboarding form for a first-time customer."""

    data = _payload()

    async def _onboard(host: DashboardHost) -> None:
        controller = host.profile
        if controller.state is not ProfileState.NEEDS_ONBOARDING:
            return
        _apply_fields(controller, data)
        await controller.submit()

    return _render(_onboard)


@bp.post("/profile/edit")
def edit_profile():
    """Submit the edit-profile form; only the posted fields change."""

    data = _payload()

    async def _edit(host: DashboardHost) -> None:
        controller = host.profile
        if await controller.begin_edit() is not ProfileState.EDITING:
            return
        _apply_fields(controller, data)
        await controller.submit()

    return _render(_edit)
