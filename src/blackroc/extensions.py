"""Database and session wiring for the Flask shell."""

from __future__ import annotations

from typing import Optional

from flask import Flask, current_app, session

from .config import BaseConfig
from .dashboard.context import AppContext, create_app_context

_SESSION_KEY = "blackroc_user_id"


class FlaskSessionStore:
    """Session store backed by Flask's signed-cookie session.

    Reads happen at call time, so one instance serves every request.
    """

    def get(self) -> Optional[str]:
        return session.get(_SESSION_KEY)

    def set(self, user_id: str) -> None:
        session.clear()
        session[_SESSION_KEY] = user_id

    def clear(self) -> None:
        session.pop(_SESSION_KEY, None)


def init_context(app: Flask) -> AppContext:
    """Build the application context from the app's config and attach it."""

    config: BaseConfig = app.config["BLACKROC_CONFIG"]
    ctx = create_app_context(config, store=FlaskSessionStore())
    app.extensions["blackroc"] = ctx
    return ctx


def get_context() -> AppContext:
    """Return the application context for the active Flask app."""

    ctx = current_app.extensions.get("blackroc")
    if ctx is None:  # pragma: no cover - exercised only when misconfigured
        raise RuntimeError("Application context not initialized")
    return ctx
