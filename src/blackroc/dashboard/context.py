"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from ..config import BaseConfig
from ..domain.repositories import DashboardQueries, ProfileRepository
from ..infra.database import SessionFactory, bootstrap_database
from ..infra.repositories import SQLModelDashboardQueries, SQLModelProfileRepository
from ..services.auth import AuthProvider, MemorySessionStore, SessionStore
from ..services.notifications import NotificationQueue


@dataclass
class AppContext:
    """Centralized application context with backend collaborators."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory
    auth: AuthProvider
    profile_repo: ProfileRepository
    dashboard_queries: DashboardQueries
    notifications: NotificationQueue


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    store: Optional[SessionStore] = None,
) -> AppContext:
    """Create and initialize the application context.

    ``store`` decides where the signed-in user id lives; the desktop default
    keeps it in memory.
    """

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)
    auth = AuthProvider(session_factory, store or MemorySessionStore())

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        auth=auth,
        profile_repo=SQLModelProfileRepository(session_factory, auth.current_identity),
        dashboard_queries=SQLModelDashboardQueries(session_factory),
        notifications=NotificationQueue(maxlen=config.NOTIFICATION_QUEUE_SIZE),
    )
