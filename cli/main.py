"""CLI entry point and argument parsing"""

import asyncio
import logging
import sys
import argparse
import webbrowser

from rich.console import Console

import settings
from github_api import GitHubAPIError, GitHubClient, parse_repo_url
from oauth.errors import ConfigurationError, OAuthError
from oauth.models import OAuthConfig
from oauth.session import SessionController
from utils.storage import CredentialStore
from cli.status_display import show_auth_status, show_permissions


console = Console()


def _open_browser(url: str) -> bool:
    if webbrowser.open(url):
        console.print("[green][OK][/green] Browser opened successfully")
        return True
    console.print("[yellow]Could not open browser automatically[/yellow]")
    console.print(f"Please open this URL manually:\n{url}")
    return False


def cmd_serve(args, session: SessionController, store: CredentialStore) -> int:
    from proxy import ProxyServer

    server = ProxyServer(debug=args.debug, bind_address=args.bind, port=args.port, store=store)
    console.print(f"Starting Sentinel OAuth server at http://{server.bind_address}:{server.port}...")
    console.print(f"  Callback: {server.oauth_config.redirect_uri}")
    console.print(f"  Token proxy: {server.oauth_config.proxy_url}")
    server.run()
    return 0


def cmd_login(args, session: SessionController, store: CredentialStore) -> int:
    if session.is_authenticated():
        console.print("[green]Already connected to GitHub.[/green] Use 'logout' first to switch accounts.")
        return 0

    show_permissions(console)
    console.print("\n[bold]Step 1:[/bold] Opening browser for GitHub authorization...")
    try:
        session.connect(navigate=_open_browser)
    except ConfigurationError as e:
        console.print(f"[red]ERROR:[/red] {e.user_message}")
        return 1
    except OAuthError as e:
        console.print(f"[red]ERROR:[/red] Authorization could not start: {e.user_message}")
        return 1

    console.print("\n[bold]Step 2:[/bold] Approve the request in your browser")
    console.print(f"  GitHub will redirect to {session.config.redirect_uri}")
    console.print("  Keep 'serve' running so the callback can complete the login")
    return 0


def cmd_logout(args, session: SessionController, store: CredentialStore) -> int:
    session.disconnect()
    if session.last_error:
        console.print(f"[yellow]Disconnected, but stored credentials could not be removed:[/yellow] {session.last_error}")
    else:
        console.print("[green]Disconnected from GitHub.[/green]")
    return 0


def cmd_status(args, session: SessionController, store: CredentialStore) -> int:
    show_auth_status(session, store, console)
    return 0


def cmd_tree(args, session: SessionController, store: CredentialStore) -> int:
    parsed = parse_repo_url(args.repo)
    if not parsed:
        console.print(f"[red]ERROR:[/red] Not a GitHub repository: {args.repo}")
        return 1
    owner, repo = parsed

    client = GitHubClient(token=store.get_token(), api_base=session.config.api_base, timeout=session.config.timeout)
    try:
        files = asyncio.run(client.fetch_repo_tree(owner, repo, args.branch))
    except GitHubAPIError as e:
        console.print(f"[red]ERROR:[/red] {e}")
        return 1

    for repo_file in files:
        console.print(repo_file.path)
    console.print(f"[dim]{len(files)} Dart files in {owner}/{repo}[/dim]")
    return 0


COMMANDS = {
    "serve": cmd_serve,
    "login": cmd_login,
    "logout": cmd_logout,
    "status": cmd_status,
    "tree": cmd_tree,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sentinel GitHub OAuth CLI")
    parser.add_argument("--credentials", default=None, help="Override credentials file (default: from config)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the token proxy and callback server")
    serve.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    serve.add_argument("--bind", "-b", default=None, help="Override bind address (default: from config)")
    serve.add_argument("--port", "-p", type=int, default=None, help="Override port (default: from config)")

    subparsers.add_parser("login", help="Connect a GitHub account")
    subparsers.add_parser("logout", help="Disconnect the GitHub account")
    subparsers.add_parser("status", help="Show session status")

    tree = subparsers.add_parser("tree", help="List Dart sources of a repository")
    tree.add_argument("repo", help="owner/repo or GitHub URL")
    tree.add_argument("--branch", default="main", help="Branch to list (default: main)")

    return parser


def main(argv=None) -> int:
    """Entry point for the CLI"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO))

    try:
        store = CredentialStore(args.credentials)
        session = SessionController(OAuthConfig.from_settings(), store)
        return COMMANDS[args.command](args, session, store)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130
    except Exception as e:
        console.print(f"\n[red]Fatal error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
