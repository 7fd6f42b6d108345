"""
Session endpoints: status page, connect, disconnect and JSON status.
"""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

import settings
from oauth.errors import ConfigurationError, OAuthError
from oauth.models import APP_METADATA, GITHUB_PERMISSIONS
from ..pages import error_page, status_page

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Show the session status or the permission summary"""
    session = request.app.state.session
    return status_page(
        settings.APP_NAME,
        settings.DEVELOPER_NAME,
        session.get_auth_state(),
        GITHUB_PERMISSIONS,
        APP_METADATA,
        session.is_configured(),
    )


@router.get("/connect")
async def connect(request: Request):
    """Redirect the browser to GitHub"""
    session = request.app.state.session
    target = {}
    try:
        session.connect(navigate=lambda url: target.setdefault("url", url))
    except ConfigurationError as e:
        logger.error(f"Connect refused: {e}")
        return HTMLResponse(error_page("OAuth not configured", e.user_message), status_code=503)
    except OAuthError as e:
        logger.error(f"Connect failed: {e}")
        return HTMLResponse(error_page("Authorization Failed", e.user_message), status_code=500)
    return RedirectResponse(target["url"], status_code=307)


@router.post("/disconnect")
async def disconnect(request: Request):
    """Forget the stored credentials"""
    request.app.state.session.disconnect()
    return RedirectResponse("/", status_code=303)


@router.get("/auth/status")
async def auth_status(request: Request):
    """Get session status without exposing secrets"""
    status = request.app.state.store.get_status()
    status["is_authenticated"] = request.app.state.session.is_authenticated()
    status["is_configured"] = request.app.state.session.is_configured()
    return status
