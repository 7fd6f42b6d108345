"""GitHub OAuth authentication package

Two independent entry points make up the flow:
- SessionController.connect builds the authorization URL and navigates away
- CallbackViewModel/CallbackHandler finish the flow when GitHub redirects back
"""

from .errors import (
    OAuthError,
    ConfigurationError,
    InvalidState,
    ExchangeFailed,
    ProviderDenied,
    ProxyUnreachable,
    StorageUnavailable,
    EntropyUnavailable,
    is_retryable_error,
)
from .models import (
    OAuthConfig,
    GitHubUser,
    AuthState,
    Permission,
    AppMetadata,
    GITHUB_PERMISSIONS,
    APP_METADATA,
)
from .state import generate_state
from .authorization import AuthorizationURLBuilder
from .token_exchange import exchange_code
from .callback import CallbackHandler
from .callback_flow import CallbackStatus, CallbackViewModel
from .session import SessionController

__all__ = [
    "OAuthError",
    "ConfigurationError",
    "InvalidState",
    "ExchangeFailed",
    "ProviderDenied",
    "ProxyUnreachable",
    "StorageUnavailable",
    "EntropyUnavailable",
    "OAuthConfig",
    "GitHubUser",
    "AuthState",
    "Permission",
    "AppMetadata",
    "GITHUB_PERMISSIONS",
    "APP_METADATA",
    "generate_state",
    "AuthorizationURLBuilder",
    "exchange_code",
    "CallbackHandler",
    "CallbackStatus",
    "CallbackViewModel",
    "is_retryable_error",
    "SessionController",
]
