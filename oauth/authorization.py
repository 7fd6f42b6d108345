"""OAuth authorization URL construction"""

from typing import TYPE_CHECKING, Tuple
from urllib.parse import urlencode

from .models import OAuthConfig
from .state import generate_state

if TYPE_CHECKING:
    from utils.storage import CredentialStore


class AuthorizationURLBuilder:
    """Builds GitHub authorization URLs with a fresh CSRF state"""

    def __init__(self, config: OAuthConfig, store: "CredentialStore"):
        self.config = config
        self.store = store

    def build_authorization_url(self) -> Tuple[str, str]:
        """Construct the GitHub authorize URL

        The generated state replaces any pending one, so only the most
        recently built URL can complete the callback.

        Returns:
            Tuple of (authorization_url, state)
        """
        state = generate_state()
        self.store.store_state(state)

        params = {
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_uri,
            "scope": " ".join(self.config.scopes),
            "state": state,
            "allow_signup": "true",
        }

        return f"{self.config.authorization_endpoint}?{urlencode(params)}", state
