"""Status display functionality for CLI"""

from rich.table import Table

from oauth.models import APP_METADATA, GITHUB_PERMISSIONS
from oauth.session import SessionController
from utils.storage import CredentialStore


def show_auth_status(session: SessionController, store: CredentialStore, console):
    """
    Display session, user and permission details

    Args:
        session: SessionController instance
        store: CredentialStore instance
        console: Rich console for output
    """
    state = session.get_auth_state()
    status = store.get_status()

    table = Table(title="GitHub Session")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("OAuth Configured", "Yes" if session.is_configured() else "No")
    table.add_row("Connected", "Yes" if state.is_authenticated else "No")
    if state.user:
        table.add_row("Login", state.user.login)
        if state.user.name:
            table.add_row("Name", state.user.name)
        if state.user.email:
            table.add_row("Email", state.user.email)
    table.add_row("Pending Authorization", "Yes" if status["pending_state"] else "No")
    table.add_row("Credentials File", status["credentials_file"])
    if state.error:
        table.add_row("Last Error", state.error)

    console.print(table)
    show_permissions(console)


def show_permissions(console):
    """Display the permissions requested from GitHub"""
    table = Table(title="Requested Permissions")
    table.add_column("Permission", style="cyan")
    table.add_column("Access")
    table.add_column("Description")

    for permission in GITHUB_PERMISSIONS:
        table.add_row(
            permission.name,
            "Read-only" if permission.is_read_only else "Read/write",
            permission.description,
        )

    console.print(table)
    owner = "GitHub" if APP_METADATA.is_github_owned else "a third party"
    console.print(f"[dim]Application owned by {owner}, created {APP_METADATA.created_date}[/dim]")
