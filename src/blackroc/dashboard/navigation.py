"""Redirect contract between the dashboard core and its hosting shell."""

from __future__ import annotations

from typing import Optional, Protocol

SIGN_IN_ROUTE = "/login"
PUBLIC_ROUTE = "/"


class Navigator(Protocol):
    def go(self, route: str) -> None:
        """Ask the shell to navigate to ``route``."""
        ...


class RecordingNavigator:
    """Navigator that only remembers the requested routes.

    Shells that answer with an HTTP redirect read ``target`` after the core
    has run.
    """

    def __init__(self) -> None:
        self.history: list[str] = []

    def go(self, route: str) -> None:
        clean = route if route.startswith("/") else f"/{route}"
        self.history.append(clean)

    @property
    def target(self) -> Optional[str]:
        return self.history[-1] if self.history else None
