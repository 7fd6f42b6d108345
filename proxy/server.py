"""
Uvicorn runner for the callback page and token exchange proxy.
"""
import logging
from pathlib import Path
from typing import Optional

import uvicorn

from settings import PORT, LOG_LEVEL, BIND_ADDRESS
from oauth.models import OAuthConfig
from utils.storage import CredentialStore
from .app import create_app

logger = logging.getLogger(__name__)

DEBUG_LOG_FILE = "sentinel_debug.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def enable_debug_logging(log_file: str = DEBUG_LOG_FILE) -> Path:
    """Send DEBUG records to the console and to an appended log file

    Replaces any handlers already on the root logger.
    """
    log_path = Path(log_file).resolve()
    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.FileHandler(log_path, mode="a", encoding="utf-8"), logging.StreamHandler()]

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logger.info(f"Debug logging enabled, appending to {log_path}")
    return log_path


class ProxyServer:
    """Serves the OAuth routes for the CLI 'serve' command

    The OAuth configuration follows the listening port, so a port override
    also moves the default redirect and proxy URLs.
    """

    def __init__(
        self,
        debug: bool = False,
        bind_address: Optional[str] = None,
        port: Optional[int] = None,
        store: Optional[CredentialStore] = None,
    ):
        self.debug = debug
        self.bind_address = bind_address or BIND_ADDRESS
        self.port = port or PORT
        self.store = store
        self.oauth_config = OAuthConfig.from_settings(port=self.port)

        if debug:
            enable_debug_logging()

    def build_app(self):
        return create_app(config=self.oauth_config, store=self.store)

    def run(self):
        """Run the server until interrupted"""
        logger.info(f"Starting Sentinel OAuth server on http://{self.bind_address}:{self.port}")
        logger.info(f"Callback {self.oauth_config.redirect_uri}, token proxy {self.oauth_config.proxy_url}")
        uvicorn.run(
            self.build_app(),
            host=self.bind_address,
            port=self.port,
            log_level="debug" if self.debug else LOG_LEVEL,
            # log_requests_middleware already logs the OAuth routes
            access_log=False,
        )
