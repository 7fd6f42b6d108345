"""Authorization code exchange through the token proxy"""

import logging
from typing import Optional

import httpx

from .errors import ExchangeFailed, ProviderDenied, ProxyUnreachable
from .models import OAuthConfig

logger = logging.getLogger(__name__)

# Errors produced by the proxy itself rather than relayed from GitHub
PROXY_ERRORS = {"Missing required parameters", "Token exchange failed", "Method not allowed"}


async def exchange_code(
    code: str,
    config: OAuthConfig,
    client: Optional[httpx.AsyncClient] = None
) -> str:
    """Exchange authorization code for an access token

    The client secret lives on the proxy, so the request only carries
    public values.

    Args:
        code: Authorization code from the OAuth callback
        config: OAuth configuration
        client: Optional HTTP client (a new one is created if None)

    Returns:
        Access token

    Raises:
        ProxyUnreachable: If the proxy could not be reached or timed out
        ProviderDenied: If GitHub rejected the code
        ExchangeFailed: For any other non-successful response
    """
    payload = {
        "code": code,
        "client_id": config.client_id,
        "redirect_uri": config.redirect_uri,
    }

    logger.info(f"Exchanging authorization code via {config.proxy_url}")
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=config.timeout) as own_client:
                response = await own_client.post(config.proxy_url, json=payload)
        else:
            response = await client.post(config.proxy_url, json=payload, timeout=config.timeout)
    except httpx.TimeoutException as e:
        logger.error(f"Token exchange timed out after {config.timeout} seconds: {e}")
        raise ProxyUnreachable("Token exchange timeout. Please try again.") from e
    except httpx.TransportError as e:
        logger.error(f"Token exchange request failed: {e}")
        raise ProxyUnreachable("Network error while contacting the OAuth proxy.") from e

    logger.debug(f"Token exchange response status: {response.status_code}")

    if not response.is_success:
        try:
            error_data = response.json()
        except ValueError:
            error_data = {"error": "Unknown error"}
        if not isinstance(error_data, dict):
            error_data = {"error": "Unknown error"}

        error = error_data.get("error")
        message = error_data.get("message") or "Failed to exchange authorization code"
        logger.error(f"Token exchange failed with status {response.status_code}: {error}")

        if response.status_code == 400 and error and error not in PROXY_ERRORS:
            raise ProviderDenied(message, status_code=response.status_code)
        raise ExchangeFailed(message, status_code=response.status_code)

    try:
        data = response.json()
    except ValueError as e:
        raise ExchangeFailed("Invalid response from OAuth proxy", status_code=response.status_code) from e

    access_token = data.get("access_token") if isinstance(data, dict) else None
    if not access_token:
        raise ExchangeFailed("No access token received from server", status_code=response.status_code)

    logger.info("Successfully exchanged authorization code for token")
    return access_token
