"""Account inspection and manipulation CLI commands."""

import asyncio
from collections.abc import Awaitable, Callable

import typer
from rich.console import Console
from rich.table import Table

from userharness.database import ConnectionProvider, close_db, get_provider
from userharness.errors import (
    AccountNotFoundError,
    AssertionFailure,
    HarnessError,
    MissingTokenError,
)
from userharness.services import AccountFixtures, StateProbe, VerificationSimulator

console = Console()
app = typer.Typer(help="Account state commands")


def _run(command: Callable[[ConnectionProvider], Awaitable[None]]) -> None:
    """Run an async command against the configured database."""

    async def _main():
        try:
            await command(get_provider())
        finally:
            await close_db()

    asyncio.run(_main())


@app.command("show")
def show(email: str = typer.Argument(..., help="User email")):
    """Show the stored state of an account."""

    async def _show(connections: ConnectionProvider):
        probe = StateProbe(connections)
        details = await probe.account_details(email)

        if details is None:
            console.print(f"[red]Error:[/red] User {email} not found")
            raise typer.Exit(1)

        table = Table(title=email)
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("First name", details.first_name or "-")
        table.add_row("Last name", details.last_name or "-")
        table.add_row("Enabled", "[green]Yes[/green]" if details.enabled else "No")
        table.add_row("Locked", "[red]Yes[/red]" if details.locked else "No")
        table.add_row("Failed logins", str(details.failed_login_attempts))
        table.add_row(
            "Verification token", "Yes" if await probe.has_verification_token(email) else "No"
        )
        table.add_row(
            "Password reset token", "Yes" if await probe.has_password_reset_token(email) else "No"
        )

        console.print(table)

    _run(_show)


@app.command("verify")
def verify(email: str = typer.Argument(..., help="User email")):
    """Mark an account's email as verified without the confirmation link."""

    async def _verify(connections: ConnectionProvider):
        probe = StateProbe(connections)
        if not await probe.has_verification_token(email):
            console.print(f"[yellow]Warning:[/yellow] No verification token for {email}")

        await VerificationSimulator(connections).simulate_verification(email)

        try:
            await probe.assert_email_verified(email)
        except AssertionFailure as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from e

        console.print(f"[green]Verified:[/green] {email}")

    _run(_verify)


@app.command("verification-url")
def verification_url(email: str = typer.Argument(..., help="User email")):
    """Print the registration confirmation URL for an account."""

    async def _url(connections: ConnectionProvider):
        try:
            url = await VerificationSimulator(connections).build_verification_url(email)
        except MissingTokenError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from e

        console.print(f"[green]Verification URL:[/green] {url}", soft_wrap=True)

    _run(_url)


@app.command("unlock")
def unlock(email: str = typer.Argument(..., help="User email")):
    """Unlock an account and reset its failed login counter."""

    async def _unlock(connections: ConnectionProvider):
        try:
            await AccountFixtures(connections).unlock_account(email)
        except AccountNotFoundError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from e

        console.print(f"[green]Unlocked:[/green] {email}")

    _run(_unlock)


@app.command("delete")
def delete(
    email: str = typer.Argument(..., help="User email"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete an account and its tokens.

    WARNING: This bypasses the application's own deletion flow!
    """
    if not force and not typer.confirm(f"Delete {email} and all of its tokens?"):
        console.print("[dim]Cancelled[/dim]")
        raise typer.Exit(0)

    async def _delete(connections: ConnectionProvider):
        try:
            await AccountFixtures(connections).delete_account(email)
        except HarnessError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from e

        console.print(f"[green]Deleted:[/green] {email}")

    _run(_delete)
