"""
Pydantic models for the token exchange proxy contract.
"""
from typing import Optional
from pydantic import BaseModel


class TokenExchangeRequest(BaseModel):
    """Browser request to the proxy"""
    code: Optional[str] = None
    client_id: Optional[str] = None
    redirect_uri: Optional[str] = None

    def is_complete(self) -> bool:
        return bool(self.code) and bool(self.client_id) and bool(self.redirect_uri)


class TokenExchangeResponse(BaseModel):
    """Token fields returned to the browser (nothing else from GitHub is exposed)"""
    access_token: str
    token_type: Optional[str] = None
    scope: Optional[str] = None


class ProxyError(BaseModel):
    """Error body"""
    error: str
    message: Optional[str] = None
