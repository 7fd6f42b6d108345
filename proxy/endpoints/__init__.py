"""
Endpoint handlers for the OAuth web app.
"""
from .auth import router as auth_router
from .callback import router as callback_router
from .health import router as health_router
from .token_exchange import router as token_exchange_router

__all__ = [
    'auth_router',
    'callback_router',
    'health_router',
    'token_exchange_router',
]
