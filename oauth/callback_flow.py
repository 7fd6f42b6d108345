"""Callback page flow: runs the handler with bounded retries, then redirects"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Mapping, Optional, Protocol, Tuple

from .errors import OAuthError, is_retryable_error

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
ROOT_URL = "/"

# Seconds before the terminal redirect
DENIED_REDIRECT_DELAY = 2.0
INVALID_REDIRECT_DELAY = 2.0
SUCCESS_REDIRECT_DELAY = 1.5
FAILURE_REDIRECT_DELAY = 3.0


class CallbackStatus(str, Enum):
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


class CallbackProcessor(Protocol):
    async def handle_callback(self, code: str, state: str) -> str: ...


class CallbackViewModel:
    """State machine behind the OAuth callback page

    PROCESSING moves to SUCCESS or FAILED exactly once, and both end with a
    scheduled redirect to the application root.
    """

    def __init__(
        self,
        handler: CallbackProcessor,
        query: Mapping[str, str],
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_redirect: Optional[Callable[[str, float], None]] = None,
        max_retries: int = MAX_RETRIES,
    ):
        self.handler = handler
        self.query = query
        self.sleep = sleep
        self.on_redirect = on_redirect
        self.max_retries = max_retries

        self.status = CallbackStatus.PROCESSING
        self.message = "Processing authorization..."
        self.retry_count = 0
        self.redirect: Optional[Tuple[str, float]] = None

    def _finish(self, status: CallbackStatus, message: str, delay: float):
        self.status = status
        self.message = message
        self.redirect = (ROOT_URL, delay)
        if self.on_redirect is not None:
            self.on_redirect(ROOT_URL, delay)

    async def run(self) -> CallbackStatus:
        """Process the callback query until a terminal state is reached"""
        while True:
            code = self.query.get("code")
            state = self.query.get("state")
            error = self.query.get("error")

            if error == "access_denied":
                logger.info("Authorization was cancelled by the user")
                self._finish(
                    CallbackStatus.FAILED,
                    "Authorization was cancelled. Redirecting...",
                    DENIED_REDIRECT_DELAY,
                )
                return self.status

            if not code or not state:
                logger.warning("Callback is missing code or state")
                self._finish(
                    CallbackStatus.FAILED,
                    "Invalid authorization response. Redirecting...",
                    INVALID_REDIRECT_DELAY,
                )
                return self.status

            try:
                await self.handler.handle_callback(code, state)
            except Exception as e:
                logger.error(f"OAuth callback error: {e}")

                if is_retryable_error(e) and self.retry_count < self.max_retries:
                    self.retry_count += 1
                    self.message = f"Connection failed. Retrying ({self.retry_count}/{self.max_retries})..."
                    # 1s, 2s, 4s
                    delay = 2 ** (self.retry_count - 1)
                    logger.info(f"Retrying OAuth callback in {delay}s ({self.retry_count}/{self.max_retries})")
                    await self.sleep(delay)
                    continue

                if self.retry_count >= self.max_retries:
                    message = f"Failed after {self.max_retries} attempts. Redirecting..."
                elif isinstance(e, OAuthError):
                    message = e.user_message
                else:
                    message = str(e) or "Authorization failed. Redirecting..."
                self._finish(CallbackStatus.FAILED, message, FAILURE_REDIRECT_DELAY)
                return self.status

            self._finish(
                CallbackStatus.SUCCESS,
                "Authorization successful! Redirecting...",
                SUCCESS_REDIRECT_DELAY,
            )
            return self.status
