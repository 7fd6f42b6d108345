"""Typed failures for the GitHub OAuth flow"""

from typing import Optional

import httpx

# Lowercase message fragments that mark a transient network failure
RETRYABLE_MARKERS = ("network", "timeout", "connection")


class OAuthError(Exception):
    """Base class for OAuth flow failures

    Attributes:
        user_message: Text that is safe to show to the end user
    """

    default_message = "Authorization failed."

    def __init__(self, message: Optional[str] = None):
        self.user_message = message or self.default_message
        super().__init__(self.user_message)


class ConfigurationError(OAuthError):
    """OAuth client id or redirect uri is not configured"""

    default_message = "OAuth is not configured. Please set GITHUB_CLIENT_ID in environment variables."


class InvalidState(OAuthError):
    """Callback state did not match the pending authorization attempt"""

    default_message = "Invalid state parameter. Possible CSRF attack."


class ExchangeFailed(OAuthError):
    """Token exchange reached the proxy but did not produce a token"""

    default_message = "Failed to exchange authorization code"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProviderDenied(ExchangeFailed):
    """GitHub rejected the authorization code"""

    default_message = "Authorization failed"


class ProxyUnreachable(OAuthError):
    """Token exchange proxy could not be reached (network error or timeout)"""

    default_message = "OAuth proxy is unreachable. Check the network connection."


class StorageUnavailable(OAuthError):
    """Credential file could not be written"""

    default_message = "Unable to save authentication. Please check storage settings."


class EntropyUnavailable(OAuthError):
    """Secure random source is unavailable"""

    default_message = "Secure random generator unavailable."


def is_retryable_error(error: BaseException) -> bool:
    """Check whether an error looks like a transient network failure

    The callback handler keeps the pending state for these, so the
    callback page may retry them.
    """
    if isinstance(error, (ProxyUnreachable, httpx.TransportError)):
        return True
    message = str(error).lower()
    return any(marker in message for marker in RETRYABLE_MARKERS)
