"""
Token exchange proxy endpoint.

Holds the GitHub client secret and swaps an authorization code for an access
token on behalf of the browser.
"""
import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from ..models import ProxyError, TokenExchangeRequest, TokenExchangeResponse

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _error(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    body = ProxyError(error=error, message=message).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body, headers=CORS_HEADERS)


async def _read_request(request: Request) -> TokenExchangeRequest:
    try:
        payload = await request.json()
    except ValueError:
        return TokenExchangeRequest()
    if not isinstance(payload, dict):
        return TokenExchangeRequest()
    try:
        return TokenExchangeRequest.model_validate(payload)
    except ValidationError:
        return TokenExchangeRequest()


async def _post_upstream(request: Request, url: str, body: Dict[str, Any]) -> httpx.Response:
    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    timeout = request.app.state.config.timeout
    client: Optional[httpx.AsyncClient] = getattr(request.app.state, "upstream_client", None)
    if client is not None:
        return await client.post(url, json=body, headers=headers, timeout=timeout)
    async with httpx.AsyncClient(timeout=timeout) as own_client:
        return await own_client.post(url, json=body, headers=headers)


@router.api_route(
    "/api/oauth",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
)
async def token_exchange(request: Request):
    """Exchange an authorization code for an access token"""
    # CORS preflight
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    if request.method != "POST":
        return _error(405, "Method not allowed")

    try:
        exchange = await _read_request(request)
        if not exchange.is_complete():
            return _error(
                400,
                "Missing required parameters",
                "code, client_id, and redirect_uri are required",
            )

        client_secret = request.app.state.client_secret
        if not client_secret:
            logger.error("GITHUB_CLIENT_SECRET not configured")
            return _error(
                500,
                "Server configuration error",
                "OAuth is not properly configured on the server",
            )

        token_response = await _post_upstream(
            request,
            request.app.state.config.token_endpoint,
            {
                "client_id": exchange.client_id,
                "client_secret": client_secret,
                "code": exchange.code,
                "redirect_uri": exchange.redirect_uri,
            },
        )

        if not token_response.is_success:
            logger.error(f"GitHub token exchange failed: {token_response.status_code} - {token_response.text}")
            return _error(
                token_response.status_code,
                "Token exchange failed",
                "Failed to exchange authorization code for access token",
            )

        token_data = token_response.json()

        # GitHub reports OAuth errors with a 200 status
        if token_data.get("error"):
            logger.error(f"GitHub returned error: {token_data.get('error_description')}")
            return _error(
                400,
                token_data["error"],
                token_data.get("error_description") or "Authorization failed",
            )

        if not token_data.get("access_token"):
            logger.error("GitHub response did not contain an access token")
            return _error(502, "Token exchange failed", "No access token in provider response")

        body = TokenExchangeResponse(
            access_token=token_data["access_token"],
            token_type=token_data.get("token_type"),
            scope=token_data.get("scope"),
        )
        return JSONResponse(status_code=200, content=body.model_dump(), headers=CORS_HEADERS)

    except Exception as e:
        logger.exception(f"OAuth proxy error: {e}")
        return _error(500, "Internal server error", str(e) or "An unexpected error occurred")
