"""
OAuth callback page (the redirect_uri registered with GitHub).
"""
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from oauth.callback_flow import CallbackStatus, CallbackViewModel
from ..pages import callback_page

router = APIRouter()


@router.get("/oauth/callback", response_class=HTMLResponse)
async def oauth_callback(request: Request):
    """Finish the authorization and redirect back to the application root"""
    view_model = CallbackViewModel(
        request.app.state.callback_handler,
        request.query_params,
        sleep=request.app.state.sleep,
    )
    status = await view_model.run()
    status_code = 200 if status is CallbackStatus.SUCCESS else 400
    return HTMLResponse(
        callback_page(status.value, view_model.message, view_model.redirect),
        status_code=status_code,
    )
