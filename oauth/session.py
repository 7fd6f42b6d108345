"""Session controller: the UI facing side of the OAuth flow"""

import logging
import webbrowser
from typing import TYPE_CHECKING, Callable, Optional

from .authorization import AuthorizationURLBuilder
from .errors import ConfigurationError, StorageUnavailable
from .models import AuthState, OAuthConfig

if TYPE_CHECKING:
    from utils.storage import CredentialStore

logger = logging.getLogger(__name__)

Navigator = Callable[[str], object]


class SessionController:
    """Connect, disconnect and report the GitHub session

    One instance is built at startup and passed to whatever needs it.
    """

    def __init__(
        self,
        config: OAuthConfig,
        store: "CredentialStore",
        navigator: Optional[Navigator] = None,
    ):
        self.config = config
        self.store = store
        self.navigator = navigator or webbrowser.open
        self.auth_builder = AuthorizationURLBuilder(config, store)
        # Token that a failed disconnect could not delete
        self._revoked_token: Optional[str] = None
        self.last_error: Optional[str] = None

    def is_configured(self) -> bool:
        return self.config.is_configured

    def is_authenticated(self) -> bool:
        token = self.store.get_token()
        if not token:
            return False
        if self._revoked_token is not None:
            if token == self._revoked_token:
                return False
            # A newer login replaced the token a failed disconnect left behind
            self._revoked_token = None
            self.last_error = None
        return True

    def connect(self, navigate: Optional[Navigator] = None) -> str:
        """Start the OAuth flow by navigating to GitHub

        Navigation leaves the current flow; completion happens in
        CallbackHandler when GitHub redirects back.

        Args:
            navigate: Overrides the session navigator for this call

        Returns:
            Authorization URL that was navigated to

        Raises:
            ConfigurationError: If client id or redirect uri is not set
        """
        if not self.config.client_id:
            raise ConfigurationError()
        if not self.config.redirect_uri:
            raise ConfigurationError("OAuth redirect URI is not configured. Please set GITHUB_REDIRECT_URI.")

        auth_url, _ = self.auth_builder.build_authorization_url()
        logger.info("Redirecting to GitHub for authorization")
        (navigate or self.navigator)(auth_url)
        return auth_url

    def disconnect(self):
        """Forget the token, user and pending state

        Never raises: storage failures are logged and the session still
        reports itself as disconnected.
        """
        token = self.store.get_token()
        try:
            self.store.revoke()
            self.last_error = None
        except StorageUnavailable as e:
            logger.error(f"Disconnect could not clear stored credentials: {e}")
            self.last_error = e.user_message
            self._revoked_token = token
        logger.info("GitHub session disconnected")

    def get_auth_state(self) -> AuthState:
        authenticated = self.is_authenticated()
        return AuthState(
            is_authenticated=authenticated,
            has_token=authenticated,
            user=self.store.get_user() if authenticated else None,
            error=self.last_error,
        )
