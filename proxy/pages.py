"""
Small HTML pages served by the local web app.
"""
from html import escape
from typing import Iterable, Optional, Tuple

from oauth.models import AppMetadata, AuthState, Permission

_STYLE = (
    "body{font-family:sans-serif;background:#0d1117;color:#c9d1d9;"
    "display:flex;justify-content:center;padding-top:10vh}"
    ".card{max-width:28rem;padding:2rem;background:#161b22;border:1px solid #30363d;border-radius:8px}"
    "a,button{color:#58a6ff}"
)


def _page(title: str, body: str, redirect: Optional[Tuple[str, float]] = None) -> str:
    refresh = ""
    if redirect is not None:
        url, delay = redirect
        refresh = f'<meta http-equiv="refresh" content="{delay:g};url={escape(url, quote=True)}">'
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>{escape(title)}</title>{refresh}<style>{_STYLE}</style></head>"
        f"<body><div class=\"card\">{body}</div></body></html>"
    )


def callback_page(status: str, message: str, redirect: Optional[Tuple[str, float]]) -> str:
    headings = {
        "processing": "Authorizing...",
        "success": "Success!",
        "failed": "Authorization Failed",
    }
    body = f"<h2>{escape(headings.get(status, status))}</h2><p>{escape(message)}</p>"
    return _page("GitHub Authorization", body, redirect)


def status_page(
    app_name: str,
    developer_name: str,
    auth_state: AuthState,
    permissions: Iterable[Permission],
    metadata: AppMetadata,
    configured: bool,
) -> str:
    if auth_state.is_authenticated:
        user = auth_state.user
        who = escape(user.name or user.login) if user else "GitHub user"
        body = (
            f"<h2>{escape(app_name)}</h2><p>Connected as <strong>{who}</strong></p>"
            "<form method=\"post\" action=\"/disconnect\"><button type=\"submit\">Disconnect</button></form>"
        )
    else:
        items = "".join(
            f"<li><strong>{escape(p.name)}</strong>"
            f"{' (read-only)' if p.is_read_only else ''}: {escape(p.description)}</li>"
            for p in permissions
        )
        action = (
            "<a href=\"/connect\">Connect GitHub</a>"
            if configured
            else "<p>OAuth is not configured on this server.</p>"
        )
        owner = "GitHub" if metadata.is_github_owned else escape(developer_name)
        body = (
            f"<h2>{escape(app_name)}</h2>"
            f"<p>{escape(app_name)} by {owner} wants to access your GitHub account:</p>"
            f"<ul>{items}</ul>{action}"
            f"<p><small>Created {escape(metadata.created_date)} &middot; {escape(metadata.user_count)}</small></p>"
        )
    if auth_state.error:
        body += f"<p>{escape(auth_state.error)}</p>"
    return _page(app_name, body)


def error_page(title: str, message: str) -> str:
    return _page(title, f"<h2>{escape(title)}</h2><p>{escape(message)}</p><a href=\"/\">Back</a>")
