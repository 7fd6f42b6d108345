"""
Sentinel OAuth web app package.

Serves the GitHub token exchange proxy, the OAuth callback page and the
connect/disconnect pages.
"""
from .app import create_app
from .server import ProxyServer

__version__ = "1.0.0"

__all__ = [
    'ProxyServer',
    'create_app',
]
