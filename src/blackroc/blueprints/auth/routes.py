"""Auth routes: public root, sign-in, registration, sign-out and password change."""

from __future__ import annotations

import asyncio

from flask import flash, jsonify, redirect, request, url_for

from ...dashboard.host import DashboardHost
from ...dashboard.navigation import PUBLIC_ROUTE, SIGN_IN_ROUTE, RecordingNavigator
from ...errors import AuthError
from ...extensions import get_context
from ...services.notifications import NotificationKind, NotificationQueue
from . import bp
from .forms import CredentialsForm, PasswordChangeForm


def _payload():
    return request.get_json(silent=True) or request.form


@bp.get("/")
def index():
    """Public root; marketing pages are served elsewhere."""

    ctx = get_context()
    return jsonify({"app": ctx.config.APP_NAME, "signed_in": ctx.auth.store.get() is not None})


@bp.get("/login")
def login_form():
    return jsonify({"message": "Sign in to continue.", "fields": ["email", "password"]})


@bp.post("/login")
def login():
    form = CredentialsForm.from_mapping(_payload())
    if not form.validate():
        return jsonify({"errors": form.errors}), 400
    identity = get_context().auth.begin_session(form.email, form.password)
    if identity is None:
        return jsonify({"errors": {"password": ["Invalid email or password."]}}), 401
    return redirect(url_for("dashboard.index"))


@bp.post("/register")
def register():
    form = CredentialsForm.from_mapping(_payload())
    if not form.validate(new_account=True):
        return jsonify({"errors": form.errors}), 400
    try:
        get_context().auth.register(form.email, form.password)
    except ValueError as exc:
        return jsonify({"errors": {"email": [str(exc)]}}), 400
    return redirect(url_for("dashboard.index"))


@bp.post("/logout")
def logout():
    ctx = get_context()
    navigator = RecordingNavigator()
    notifier = NotificationQueue(maxlen=ctx.config.NOTIFICATION_QUEUE_SIZE)
    host = DashboardHost.from_context(ctx, navigator, notifier)
    if not asyncio.run(host.sign_out()):
        notifications = [n.to_dict() for n in notifier.drain()]
        return jsonify({"notifications": notifications}), 500
    for notification in notifier.drain():
        flash(notification.title, notification.kind.value)
    return redirect(navigator.target or PUBLIC_ROUTE)


@bp.post("/account/password")
def change_password():
    """Change the signed-in user's password; the session stays open."""

    auth = get_context().auth
    form = PasswordChangeForm.from_mapping(_payload())
    if not form.validate():
        return jsonify({"errors": form.errors}), 400
    try:
        auth.change_password(form.current_password, form.new_password)
    except AuthError:
        return redirect(SIGN_IN_ROUTE)
    except ValueError as exc:
        return jsonify({"errors": {"current_password": [str(exc)]}}), 400
    notifier = NotificationQueue(maxlen=get_context().config.NOTIFICATION_QUEUE_SIZE)
    notifier.notify(NotificationKind.SUCCESS, "Password updated", "Your password has been changed.")
    return jsonify({"notifications": [n.to_dict() for n in notifier.drain()]})
