"""Flask CLI commands for BlackRoc."""

from __future__ import annotations

import asyncio
import json

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("blackroc-create-user")
    @click.option("--email", required=True, help="Sign-in email for the new account")
    @click.password_option(help="Password for the new account")
    def blackroc_create_user(email: str, password: str) -> None:
        """Create a sign-in account."""

        from .extensions import get_context
        from .services.auth import create_user

        try:
            user = create_user(email=email, password=password, session_factory=get_context().session_factory)
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"Created user {user.email} ({user.id})")

    @app.cli.command("blackroc-seed-demo")
    @click.option("--email", required=True, help="Account to seed demo records for")
    @click.option("--force", is_flag=True, default=False, help="Seed even if data already exists")
    def blackroc_seed_demo(email: str, force: bool) -> None:
        """Seed demo quotes, orders and invoices for an account."""

        from .extensions import get_context
        from .services.auth import get_user_by_email
        from .services.demo_seed import run_demo_seed

        ctx = get_context()
        user = get_user_by_email(email, ctx.session_factory)
        if user is None:
            raise click.ClickException(f"No account for {email}")
        summary = run_demo_seed(ctx.session_factory, user_id=user.id, force=force)
        click.echo(
            f"Demo data ready ({summary.quotes} quotes, {summary.orders} orders, "
            f"{summary.invoices} invoices)"
        )

    @app.cli.command("blackroc-stats")
    @click.option("--email", required=True, help="Account whose dashboard to print")
    def blackroc_stats(email: str) -> None:
        """Print the dashboard snapshot for an account as JSON."""

        from .dashboard.serializers import snapshot_to_dict
        from .extensions import get_context
        from .services.aggregation import AggregationService
        from .services.auth import get_user_by_email

        ctx = get_context()
        user = get_user_by_email(email, ctx.session_factory)
        if user is None:
            raise click.ClickException(f"No account for {email}")
        service = AggregationService(
            ctx.dashboard_queries, ctx.notifications, recent_limit=ctx.config.RECENT_LIMIT
        )
        snapshot = asyncio.run(service.load(user.id))
        click.echo(json.dumps(snapshot_to_dict(snapshot), indent=2))
        for notification in ctx.notifications.drain():
            click.echo(f"{notification.title}: {notification.description}", err=True)
