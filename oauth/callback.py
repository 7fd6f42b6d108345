"""OAuth callback handling: state check, code exchange, profile fetch"""

import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from .errors import InvalidState, is_retryable_error
from .models import GitHubUser, OAuthConfig
from .token_exchange import exchange_code

if TYPE_CHECKING:
    from utils.storage import CredentialStore

logger = logging.getLogger(__name__)

CodeExchanger = Callable[[str, OAuthConfig], Awaitable[str]]
UserFetcher = Callable[[str], Awaitable[GitHubUser]]


async def fetch_github_user(token: str, config: OAuthConfig) -> GitHubUser:
    """Fetch the GitHub profile for a freshly issued token"""
    from github_api import GitHubClient

    return await GitHubClient(token=token, api_base=config.api_base, timeout=config.timeout).fetch_user()


class CallbackHandler:
    """Completes the authorization started by SessionController.connect"""

    def __init__(
        self,
        config: OAuthConfig,
        store: "CredentialStore",
        exchanger: Optional[CodeExchanger] = None,
        user_fetcher: Optional[UserFetcher] = None,
    ):
        self.config = config
        self.store = store
        self.exchanger = exchanger or exchange_code
        self.user_fetcher = user_fetcher or self._fetch_user

    async def handle_callback(self, code: str, state: str) -> str:
        """Validate the callback and exchange the code for a token

        Args:
            code: Authorization code from GitHub
            state: State parameter for validation

        Returns:
            Access token

        Raises:
            InvalidState: If state does not match the pending attempt
            ProxyUnreachable, ExchangeFailed, ProviderDenied: From the exchange;
                network failures leave the state pending for a retry
            StorageUnavailable: If the token could not be saved
        """
        if not self.store.validate_state(state):
            raise InvalidState()

        try:
            token = await self.exchanger(code, self.config)
        except Exception as e:
            # The callback page retries these, and a retry needs the state back
            if is_retryable_error(e):
                self.store.store_state(state)
            raise

        self.store.store_token(token)
        await self.fetch_and_store_user(token)
        return token

    async def _fetch_user(self, token: str) -> GitHubUser:
        return await fetch_github_user(token, self.config)

    async def fetch_and_store_user(self, token: str) -> Optional[GitHubUser]:
        """Fetch and persist the user profile; failures are logged only"""
        try:
            user = await self.user_fetcher(token)
        except Exception as e:
            logger.warning(f"Failed to fetch user: {e}")
            return None
        self.store.store_user(user)
        logger.info(f"Authenticated as GitHub user {user.login}")
        return user
