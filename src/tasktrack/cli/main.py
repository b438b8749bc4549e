"""tasktrack CLI: database setup and account administration.

Usage:
    tasktrack init-db                          # Create tables (no-op if present)
    tasktrack init-db --force                  # Drop and recreate every table
    tasktrack create-admin --name Ana --email a@x.com
    tasktrack set-role a@x.com admin           # Promote / demote an account
    tasktrack delete-user a@x.com              # Delete account and its items
    tasktrack users                            # List accounts
    tasktrack serve --port 5001                # Run the API with uvicorn

Every database command takes --database-url (defaults to
TASKTRACK_DATABASE_URL).
"""

from __future__ import annotations

import asyncio
import sys
from typing import Awaitable, Callable, TypeVar

import click

from tasktrack import __version__
from tasktrack.auth.password import PasswordHasher
from tasktrack.config import settings
from tasktrack.db.engine import build_engine, build_session_factory
from tasktrack.db.models import ROLES, Base
from tasktrack.errors import AppError, NotFound
from tasktrack.services.user_store import UserStore
from tasktrack.services.validation import validate_registration

T = TypeVar("T")

_database_url_option = click.option(
    "--database-url",
    default=lambda: settings.database_url,
    show_default="TASKTRACK_DATABASE_URL",
    help="SQLAlchemy async database URL",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro: Awaitable[T]) -> T:
    """Run a coroutine from a click handler; report domain errors and exit 1."""
    try:
        return asyncio.run(coro)
    except AppError as e:
        click.secho(f"Error: {e.detail}", fg="red", err=True)
        sys.exit(1)


async def _with_store(database_url: str, fn: Callable[[UserStore], Awaitable[T]]) -> T:
    engine = build_engine(database_url)
    try:
        async with build_session_factory(engine)() as session:
            return await fn(UserStore(session))
    finally:
        await engine.dispose()


async def _require_user(store: UserStore, email: str):
    user = await store.find_by_email(email)
    if user is None:
        raise NotFound(f"No user with email {email}")
    return user


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="tasktrack")
def main():
    """tasktrack: task tracking API administration."""


@main.command("init-db")
@click.option("--force", is_flag=True, help="Drop all tables first (destroys data)")
@_database_url_option
def init_db(force: bool, database_url: str):
    """Create the users and items tables."""

    async def _impl():
        engine = build_engine(database_url)
        try:
            async with engine.begin() as conn:
                if force:
                    await conn.run_sync(Base.metadata.drop_all)
                await conn.run_sync(Base.metadata.create_all)
        finally:
            await engine.dispose()

    _run(_impl())
    if force:
        click.secho("Tables dropped and recreated", fg="yellow")
    else:
        click.secho("Tables synced", fg="green")


@main.command("create-admin")
@click.option("--name", required=True)
@click.option("--email", required=True)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@_database_url_option
def create_admin(name: str, email: str, password: str, database_url: str):
    """Create an account with the admin role."""
    errors = validate_registration(
        name, email, password, min_password_length=settings.password_min_length
    )
    if errors:
        for e in errors:
            click.secho(f"{e.field}: {e.message}", fg="red", err=True)
        sys.exit(1)

    password_hash = PasswordHasher(rounds=settings.bcrypt_rounds).hash(password)
    user = _run(
        _with_store(
            database_url,
            lambda store: store.create(
                name=name.strip(), email=email, password_hash=password_hash, role="admin"
            ),
        )
    )
    click.secho(f"Admin created: {user.email} ({user.id})", fg="green")


@main.command("set-role")
@click.argument("email")
@click.argument("role", type=click.Choice(ROLES))
@_database_url_option
def set_role(email: str, role: str, database_url: str):
    """Change the role of the account registered under EMAIL."""

    async def _impl(store: UserStore):
        user = await _require_user(store, email)
        return await store.set_role(user.id, role)

    user = _run(_with_store(database_url, _impl))
    click.secho(f"{user.email} is now {user.role}", fg="green")


@main.command("delete-user")
@click.argument("email")
@click.confirmation_option(prompt="Delete this user and all of their items?")
@_database_url_option
def delete_user(email: str, database_url: str):
    """Delete the account registered under EMAIL, with all of its items."""

    async def _impl(store: UserStore):
        user = await _require_user(store, email)
        await store.delete(user.id)

    _run(_with_store(database_url, _impl))
    click.secho(f"Deleted {email}", fg="green")


@main.command()
@_database_url_option
def users(database_url: str):
    """List registered accounts."""
    rows = _run(_with_store(database_url, lambda store: store.list_users()))
    if not rows:
        click.echo("No users.")
        return
    header = f"{'EMAIL':<32}  {'ROLE':<6}  {'NAME':<24}  ID"
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for u in rows:
        click.echo(f"{u.email[:32]:<32}  {u.role:<6}  {u.name[:24]:<24}  {u.id}")


@main.command()
@click.option("--host", default=lambda: settings.host, show_default="TASKTRACK_HOST")
@click.option("--port", default=lambda: settings.port, type=int, show_default="TASKTRACK_PORT")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: str, port: int, reload: bool):
    """Run the API server."""
    import uvicorn

    uvicorn.run("tasktrack.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
