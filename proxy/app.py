"""
FastAPI application initialization and configuration.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

import httpx
from fastapi import FastAPI

import settings
from oauth.callback import CallbackHandler
from oauth.models import OAuthConfig
from oauth.session import SessionController
from utils.storage import CredentialStore
from .middleware import log_requests_middleware
from .endpoints import (
    auth_router,
    callback_router,
    health_router,
    token_exchange_router,
)

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[OAuthConfig] = None,
    store: Optional[CredentialStore] = None,
    client_secret: Optional[str] = None,
    callback_handler: Optional[CallbackHandler] = None,
    upstream_client: Optional[httpx.AsyncClient] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> FastAPI:
    """Build the web app with its services

    Services are created once here and shared through app.state.

    Args:
        config: OAuth configuration (defaults to settings)
        store: Credential store (defaults to the configured credentials file)
        client_secret: GitHub client secret for the proxy (defaults to settings)
        callback_handler: Handler used by the callback page
        upstream_client: HTTP client the proxy uses to reach GitHub
        sleep: Delay function for callback retries
    """
    config = config or OAuthConfig.from_settings()
    store = store or CredentialStore()

    app = FastAPI(title="Sentinel GitHub OAuth", version="1.0.0")

    app.state.config = config
    app.state.store = store
    app.state.client_secret = settings.GITHUB_CLIENT_SECRET if client_secret is None else client_secret
    app.state.session = SessionController(config, store)
    app.state.callback_handler = callback_handler or CallbackHandler(config, store)
    app.state.upstream_client = upstream_client
    app.state.sleep = sleep

    app.middleware("http")(log_requests_middleware)

    app.include_router(health_router)
    app.include_router(token_exchange_router)
    app.include_router(callback_router)
    app.include_router(auth_router)

    logger.debug("FastAPI application initialized with all routers and middleware")
    return app
