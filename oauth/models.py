"""Data models for GitHub OAuth authentication"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import settings


@dataclass(frozen=True)
class OAuthConfig:
    """Immutable OAuth client configuration

    Attributes:
        client_id: Public GitHub OAuth app client id
        redirect_uri: Callback URL registered with the GitHub app
        scopes: Requested scopes, in request order
        authorization_endpoint: GitHub authorize URL
        token_endpoint: GitHub token URL (used by the proxy only)
        proxy_url: Token exchange proxy endpoint
        api_base: GitHub REST API base URL
        timeout: Timeout for outbound requests in seconds
    """
    client_id: str
    redirect_uri: str
    scopes: Tuple[str, ...] = ("repo", "read:user")
    authorization_endpoint: str = "https://github.com/login/oauth/authorize"
    token_endpoint: str = "https://github.com/login/oauth/access_token"
    proxy_url: str = "/api/oauth"
    api_base: str = "https://api.github.com"
    timeout: float = 10.0

    @classmethod
    def from_settings(cls, port: Optional[int] = None) -> "OAuthConfig":
        """Build the configuration from the settings module

        Args:
            port: Port the local server listens on. Redirect and proxy URLs
                that are not set explicitly point at this port (defaults to
                settings.PORT).
        """
        local_base = f"http://localhost:{port or settings.PORT}"
        return cls(
            client_id=settings.GITHUB_CLIENT_ID,
            redirect_uri=settings.GITHUB_REDIRECT_URI or f"{local_base}/oauth/callback",
            scopes=tuple(settings.SCOPES),
            authorization_endpoint=settings.GITHUB_AUTHORIZE_URL,
            token_endpoint=settings.GITHUB_TOKEN_URL,
            proxy_url=settings.OAUTH_PROXY_URL or f"{local_base}/api/oauth",
            api_base=settings.GITHUB_API_BASE,
            timeout=settings.REQUEST_TIMEOUT,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id) and bool(self.redirect_uri)


@dataclass
class GitHubUser:
    """GitHub profile fields kept after login"""
    login: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GitHubUser":
        """Build a user from a GitHub API or stored payload

        Raises:
            ValueError: If the payload has no login
        """
        if not isinstance(data, dict) or not data.get("login"):
            raise ValueError("User payload has no login")
        return cls(
            login=data["login"],
            name=data.get("name"),
            avatar_url=data.get("avatar_url"),
            email=data.get("email"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "login": self.login,
            "name": self.name,
            "avatar_url": self.avatar_url,
            "email": self.email,
        }


@dataclass
class AuthState:
    """Snapshot of the session for display"""
    is_authenticated: bool
    has_token: bool
    user: Optional[GitHubUser] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class Permission:
    """Human readable description of a requested scope"""
    name: str
    description: str
    is_read_only: bool
    icon: Optional[str] = None


@dataclass(frozen=True)
class AppMetadata:
    """Application facts shown next to the permission list"""
    is_github_owned: bool
    created_date: str
    user_count: str


GITHUB_PERMISSIONS: List[Permission] = [
    Permission(
        name="Repository Access",
        description="Read and analyze your public and private repositories",
        is_read_only=True,
        icon="repo",
    ),
    Permission(
        name="User Profile",
        description="Read your basic profile information",
        is_read_only=True,
        icon="user",
    ),
]

APP_METADATA = AppMetadata(
    is_github_owned=False,
    created_date="2024",
    user_count="New Application",
)
