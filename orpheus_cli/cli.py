"""
Command-line interface for Orpheus management.
"""

import asyncio
from datetime import timedelta
from typing import Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy import func, select

from orpheus_common.config import get_settings, validate_settings
from orpheus_common.db import Database
from orpheus_common.logging import get_logger, setup_logging
from orpheus_common.models import Background, Essay, Paper, Photo, SiteSetting, User

app = typer.Typer(help="Orpheus publishing back end CLI")
console = Console()
logger = get_logger(__name__)

T = TypeVar("T")


def _with_database(action: Callable[[Database], Awaitable[T]]) -> T:
    """Run an async action against the configured database, then close it."""
    settings = get_settings()
    database = Database(settings.database)
    if not database.available:
        console.print("[bold red]✗[/bold red] ORPHEUS_DB_URL is not set")
        raise typer.Exit(code=1)

    async def runner() -> T:
        try:
            return await action(database)
        finally:
            await database.dispose()

    return asyncio.run(runner())


@app.command()
def init_db():
    """Create missing database tables."""
    console.print("[bold green]Initializing database...[/bold green]")
    _with_database(lambda database: database.create_all())
    console.print("[bold green]✓[/bold green] Database initialized successfully")


@app.command()
def seed():
    """Load sample photos, essays and papers into empty tables."""
    from orpheus_cli.seed import seed_database

    async def run(database: Database) -> dict[str, int]:
        await database.create_all()
        return await seed_database(database)

    added = _with_database(run)

    table = Table(title="Seeded Content")
    table.add_column("Table", style="cyan")
    table.add_column("Added", style="magenta", justify="right")
    for name, count in added.items():
        table.add_row(name, str(count) if count else "skipped (not empty)")
    console.print(table)


@app.command()
def status():
    """Show configuration problems and row counts."""
    settings = get_settings()
    problems = validate_settings(settings)

    console.print("\n[bold]Orpheus Status[/bold]\n")
    console.print(f"[bold]Environment:[/bold] {settings.environment}")
    console.print(f"[bold]Object storage:[/bold] {'configured' if settings.storage.is_configured else 'not configured'}")
    for problem in problems:
        console.print(f"[yellow]! {problem}[/yellow]")

    if not settings.database.url:
        return

    async def count_rows(database: Database) -> dict[str, int]:
        counts = {}
        async with database.session() as session:
            for model in (User, Photo, Essay, Paper, Background, SiteSetting):
                result = await session.execute(select(func.count(model.id)))
                counts[model.__tablename__] = result.scalar_one()
        return counts

    counts = _with_database(count_rows)

    table = Table(title="Rows by Table")
    table.add_column("Table", style="cyan")
    table.add_column("Count", style="magenta", justify="right")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print(table)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default from ORPHEUS_WEB_HOST)"),
    port: Optional[int] = typer.Option(None, help="Bind port (default from ORPHEUS_WEB_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Run the API server with uvicorn."""
    import uvicorn

    from orpheus_web.config import get_web_settings

    web_settings = get_web_settings()
    uvicorn.run(
        "orpheus_web.main:create_app",
        factory=True,
        host=host or web_settings.host,
        port=port or web_settings.port,
        reload=reload,
    )


@app.command()
def issue_token(
    email: str = typer.Argument(..., help="Email of the user; created if missing"),
    days: Optional[int] = typer.Option(None, help="Token lifetime in days (default from settings)"),
):
    """Print a session token usable as `Authorization: Bearer <token>`."""
    from orpheus_web.services.sessions import SessionService
    from orpheus_web.services.users import login_with_email

    settings = get_settings()
    if not settings.auth.jwt_secret.get_secret_value():
        console.print("[bold red]✗[/bold red] ORPHEUS_AUTH_JWT_SECRET is not set")
        raise typer.Exit(code=1)
    sessions = SessionService.from_settings(settings.auth)

    async def run(database: Database):
        async with database.session() as session:
            result = await login_with_email(session, sessions, settings.auth, email)
            token = result.token
            if days is not None:
                token = sessions.issue_session(
                    result.user.id, result.user.email or "", result.user.role.value, ttl=timedelta(days=days)
                )
            return result.user.id, result.user.role.value, token

    user_id, role, token = _with_database(run)
    console.print(f"[bold]User:[/bold] {email} (id={user_id}, role={role})")
    console.print(token, soft_wrap=True)


@app.command()
def settings_get(key: str = typer.Argument(..., help="Setting key")):
    """Print one site setting."""
    from orpheus_web.services.site_settings import SettingsRepository

    async def run(database: Database) -> Optional[str]:
        async with database.session() as session:
            return await SettingsRepository(session).get(key)

    value = _with_database(run)
    if value is None:
        console.print(f"[bold red]✗[/bold red] Setting {key} not found")
        raise typer.Exit(code=1)
    console.print(value)


@app.command()
def settings_set(
    key: str = typer.Argument(..., help="Setting key"),
    value: str = typer.Argument(..., help="New value"),
):
    """Insert or overwrite one site setting."""
    from orpheus_web.services.site_settings import SettingsRepository

    async def run(database: Database) -> None:
        async with database.session() as session:
            await SettingsRepository(session).set(key, value)

    _with_database(run)
    console.print(f"[bold green]✓[/bold green] {key} saved")


def main():
    """Main entry point."""
    settings = get_settings()
    setup_logging(settings.logging)
    app()


if __name__ == "__main__":
    main()
