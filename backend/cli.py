"""
VividPlate CLI.

Command-line interface for common operations: schema creation, seeding,
admin accounts and the subscription expiry job.
"""

import sys

import httpx
import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="vividplate",
    help="VividPlate operations CLI",
    add_completion=False,
)
console = Console()


def _users_table(title: str, users) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Username", style="green")
    table.add_column("Premium until", style="yellow")
    for user in users:
        end = user.premium_end_date.isoformat() if user.premium_end_date else "-"
        table.add_row(str(user.id), user.username, end)
    return table


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create all tables."""
    from rest_api.models import Base
    from shared.infrastructure.db import engine

    Base.metadata.create_all(bind=engine)
    console.print("[green]✓ Tables created[/green]")


@app.command()
def db_seed(
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding in production"),
):
    """Seed the configured admin and the ad settings rows."""
    from rest_api.seed import seed
    from shared.config.settings import settings
    from shared.infrastructure.db import get_db_context

    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    with get_db_context() as db:
        seed(db)
    console.print("[green]✓ Seed complete[/green]")


@app.command()
def create_admin(
    username: str = typer.Argument(..., help="Admin username"),
    email: str = typer.Argument(..., help="Admin email"),
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Admin password"),
):
    """Create an administrator account."""
    from rest_api.models import User
    from rest_api.repositories import UserRepository
    from rest_api.services.domain.auth_service import check_password_strength
    from shared.config.constants import SubscriptionTier
    from shared.infrastructure.db import get_db_context, safe_commit
    from shared.security.password import hash_password
    from shared.utils.exceptions import ValidationError

    try:
        check_password_strength(password)
    except ValidationError as e:
        console.print(f"[red]✗ {e.detail}[/red]")
        raise typer.Exit(1)

    with get_db_context() as db:
        users = UserRepository(db)
        taken = users.username_or_email_taken(username, email)
        if taken:
            console.print(f"[red]✗ That {taken} is already in use[/red]")
            raise typer.Exit(1)

        admin = users.save(
            User(
                username=username,
                email=email,
                password=hash_password(password),
                subscription_tier=SubscriptionTier.FREE,
                is_admin=True,
                is_active=True,
            )
        )
        safe_commit(db)
        console.print(f"[green]✓ Admin created (id {admin.id})[/green]")


# =============================================================================
# Subscription Commands
# =============================================================================

@app.command()
def check_expiry():
    """Downgrade expired premium accounts and flag the ones expiring soon."""
    from rest_api.services.domain import SubscriptionService
    from shared.infrastructure.db import get_db_context

    with get_db_context() as db:
        service = SubscriptionService(db)
        downgraded = service.downgrade_expired()
        notified = service.check_expiry_notifications()

        if downgraded:
            console.print(_users_table("Downgraded to free", downgraded))
        if notified:
            console.print(_users_table("Expiry reminders", notified))

    console.print(
        f"[green]✓ {len(downgraded)} downgraded, {len(notified)} reminded[/green]"
    )


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option("http://localhost:8000", help="REST API base URL"),
):
    """Check service health."""
    try:
        response = httpx.get(f"{url}/api/health/detailed", timeout=5.0)
    except httpx.HTTPError as e:
        console.print(f"[red]✗ {type(e).__name__}: {e}[/red]")
        raise typer.Exit(1)

    data = response.json()
    table = Table(title=f"Service Health ({data.get('environment', '?')})")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Latency", style="yellow")

    for name, result in data.get("dependencies", {}).items():
        latency = result.get("latency_ms")
        table.add_row(name, result["status"], f"{latency}ms" if latency is not None else "-")

    console.print(table)
    if data.get("status") != "healthy":
        raise typer.Exit(1)


@app.command()
def version():
    """Show version information."""
    from rest_api.main import app as api

    table = Table(title="VividPlate Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", api.version)
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
