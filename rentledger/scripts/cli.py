"""CLI commands.

Usage:
    flask sweep-overdue                  # all owners, as of today
    flask sweep-overdue --user 1 --date 2025-01-31
    flask seed-demo
"""

from __future__ import annotations

from datetime import date

import click
from flask.cli import with_appcontext


@click.command("sweep-overdue")
@click.option("--user", "-u", type=int, help="Sweep a single owner only")
@click.option("--date", "as_of", type=click.DateTime(formats=["%Y-%m-%d"]), help="Sweep as of this date")
@with_appcontext
def sweep_overdue_command(user: int | None, as_of):
    """Mark past-due unpaid payments and expenses as overdue."""
    from rentledger.domains.rentals.tasks.sweep_overdue import run

    sweep_date: date | None = as_of.date() if as_of else None
    results = run(as_of=sweep_date, user_id=user)
    click.echo(f"Marked overdue: {results['payments']} payment(s), {results['expenses']} expense(s)")


@click.command("seed-demo")
@with_appcontext
def seed_demo_command():
    """Create a demo landlord account with sample data."""
    from rentledger.scripts.seed_demo import DEMO_EMAIL, DEMO_PASSWORD, seed_demo_user, seed_portfolio

    user = seed_demo_user()
    result = seed_portfolio(user.id)
    if result["created"]:
        click.echo(f"Seeded demo data for {DEMO_EMAIL} (password {DEMO_PASSWORD})")
    else:
        click.echo(f"Demo data already present for {DEMO_EMAIL}")


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(sweep_overdue_command)
    app.cli.add_command(seed_demo_command)
