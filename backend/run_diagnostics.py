#!/usr/bin/env python3
"""
Session diagnostics for the Storefy client core.

Runs the full resolution pipeline against the configured Supabase
project and prints what a UI would see: auth state, PIN session, store
list, current store and permissions.

Usage:
    uv run python run_diagnostics.py                            # Show resolved session
    uv run python run_diagnostics.py --create-test-pin STORE_ID # Start a test PIN session
    uv run python run_diagnostics.py --clear-pin                # End the PIN session

Configuration:
    Set SUPABASE_URL and SUPABASE_ANON_KEY in your .env file. The session
    file defaults to ~/.storefy/session.json (STORAGE_PATH).
"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.table import Table

from client.dependencies import ServiceContainer
from modules.permissions.models import Page
from modules.session.models import PinSessionFields
from shared.config import get_settings
from shared.exceptions import StorefyError
from shared.log_config import configure_logging
from shared.models import Role

console = Console()


def show_session(container: ServiceContainer) -> None:
    """Print the PIN session snapshot."""
    info = container.pin_store.get_session_info()

    table = Table(title="PIN Session")
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Active", "[green]yes[/green]" if info.has_pin_session else "[dim]no[/dim]")
    if info.has_pin_session:
        session = container.pin_store.get_pin_session()
        if session is not None:
            table.add_row("Member", f"{session.name} ({session.member_id})")
            table.add_row("Store", f"{session.store_name} ({session.store_id})")
            table.add_row("Role", session.role.value)
        table.add_row("Expires", info.pin_expires_at.isoformat() if info.pin_expires_at else "-")
        table.add_row("Minutes left", str(info.minutes_left))
        table.add_row("Last activity", info.last_activity.isoformat() if info.last_activity else "-")
    console.print(table)


async def show_resolution(container: ServiceContainer) -> int:
    """Run initialization and print the resolved state. Returns an exit code."""
    context = container.context
    try:
        state = await context.start()
    finally:
        await context.stop()

    console.print(f"Phase: [bold]{state.phase.value}[/bold]")
    if state.is_error:
        console.print(f"[red]Error:[/red] {state.error} ({state.error_code})")
        return 1

    console.print(f"Auth type: [bold]{state.auth_type.value}[/bold]")
    if state.auth.identity is not None:
        identity = state.auth.identity
        verified = "verified" if identity.email_verified else "unverified"
        console.print(f"Identity: {identity.email or identity.id} ({verified})")
    console.print()

    stores = Table(title="Stores")
    stores.add_column("ID", style="dim")
    stores.add_column("Name")
    stores.add_column("Role")
    stores.add_column("Current")
    current_id = state.current_store.id if state.current_store else None
    for store in state.stores.stores:
        stores.add_row(
            store.id,
            store.name,
            store.role.value if store.role else "-",
            "[green]✓[/green]" if store.id == current_id else "",
        )
    if state.stores.stores:
        console.print(stores)
    else:
        console.print("[dim]No stores available.[/dim]")
    if state.stores.discarded_reason:
        console.print(f"[yellow]Discarded selection:[/yellow] {state.stores.discarded_reason}")
    console.print()

    role = state.role.role.value if state.role else "none"
    pages = Table(title=f"Pages for role: {role}")
    pages.add_column("Page")
    pages.add_column("Access")
    for page in Page:
        allowed = state.permissions.can_access_page(page)
        pages.add_row(page.value, "[green]yes[/green]" if allowed else "[red]no[/red]")
    console.print(pages)
    return 0


async def create_test_pin(container: ServiceContainer, store_id: str, role: str, name: str) -> int:
    store = await container.store_service.get_store_by_id(store_id)
    if store is None:
        console.print(f"[red]Error:[/red] Store not found: {store_id}")
        return 1

    session = container.pin_store.create_pin_session(
        PinSessionFields(
            member_id="diagnostics",
            store_id=store.id,
            role=Role(role),
            name=name,
            store_name=store.name,
        )
    )
    console.print(
        f"[green]✓[/green] PIN session created for {session.name} at {session.store_name}, "
        f"expires {session.expires_at.isoformat()}"
    )
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Inspect the resolved Storefy session",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  uv run python run_diagnostics.py                         Show resolved session
  uv run python run_diagnostics.py --create-test-pin s1    Start a cashier PIN session at s1
  uv run python run_diagnostics.py --clear-pin             End the PIN session
        """
    )
    parser.add_argument(
        "--create-test-pin",
        metavar="STORE_ID",
        help="Create a test PIN session bound to a store"
    )
    parser.add_argument(
        "--role",
        choices=[r.value for r in Role],
        default=Role.CASHIER.value,
        help="Role for the test PIN session (default: cashier)"
    )
    parser.add_argument(
        "--name",
        default="Test Cashier",
        help="Display name for the test PIN session"
    )
    parser.add_argument(
        "--clear-pin",
        action="store_true",
        help="End the current PIN session"
    )

    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings, console=console)
    container = ServiceContainer(settings=settings)

    console.print(f"[bold]{settings.app_name} Session Diagnostics[/bold]")
    console.print(f"[dim]Session file: {settings.storage_path}[/dim]")
    console.print()

    try:
        if args.clear_pin:
            container.pin_store.clear_pin_session()
            console.print("[green]✓[/green] PIN session cleared")
            return 0
        if args.create_test_pin:
            return asyncio.run(
                create_test_pin(container, args.create_test_pin, args.role, args.name)
            )

        show_session(container)
        console.print()
        return asyncio.run(show_resolution(container))

    except StorefyError as e:
        console.print(f"[red]Error:[/red] {e.message} ({e.code})")
        if e.retryable:
            console.print("[dim]The backend may be unreachable; try again.[/dim]")
        return 1
    except RuntimeError as e:
        # Missing Supabase configuration
        console.print(f"[red]Error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
