import hmac
import json
import logging
import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional

from settings import CREDENTIALS_FILE
from oauth.errors import StorageUnavailable
from oauth.models import GitHubUser

logger = logging.getLogger(__name__)

TOKEN_KEY = "sentinel_oauth_token"
USER_KEY = "sentinel_oauth_user"
STATE_KEY = "sentinel_oauth_state"


class CredentialStore:
    """Credential storage with file permissions

    Owns the token, the user profile and the pending CSRF state. Every other
    component goes through these accessors.
    """

    def __init__(self, credentials_file: Optional[str] = None):
        self.credentials_path = Path(credentials_file if credentials_file else CREDENTIALS_FILE)
        self._ensure_secure_directory()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.credentials_path.parent
        if not parent_dir.exists():
            try:
                parent_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(f"Failed to create credentials directory {parent_dir}: {e}")
                return
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def _read(self) -> Dict[str, Any]:
        """Read the whole credentials file

        Raises:
            OSError, ValueError: If the file cannot be read or parsed
        """
        if not self.credentials_path.exists():
            return {}
        data = json.loads(self.credentials_path.read_text())
        if not isinstance(data, dict):
            raise ValueError("Credentials file does not contain an object")
        return data

    def _write(self, data: Dict[str, Any]):
        """Replace the credentials file contents

        Raises:
            OSError: If the file cannot be written
        """
        self.credentials_path.write_text(json.dumps(data, indent=2))
        # Set file permissions to 600 on Unix-like systems
        if platform.system() != "Windows":
            os.chmod(self.credentials_path, 0o600)

    def _get(self, key: str) -> Any:
        try:
            return self._read().get(key)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read {key} from {self.credentials_path}: {e}")
            return None

    def _set(self, key: str, value: Any):
        try:
            data = self._read()
        except (OSError, ValueError) as e:
            logger.warning(f"Discarding unreadable credentials file {self.credentials_path}: {e}")
            data = {}
        data[key] = value
        self._write(data)

    def _remove(self, *keys: str):
        try:
            data = self._read()
        except (OSError, ValueError):
            data = {}
        for key in keys:
            data.pop(key, None)
        if data:
            self._write(data)
        elif self.credentials_path.exists():
            self.credentials_path.unlink()

    # Token
    def store_token(self, token: str):
        """Persist the access token

        Raises:
            StorageUnavailable: If the token could not be written
        """
        try:
            self._set(TOKEN_KEY, token)
        except OSError as e:
            logger.error(f"Failed to store token: {e}")
            raise StorageUnavailable() from e

    def get_token(self) -> Optional[str]:
        """Get the stored access token, or None if absent or unreadable"""
        token = self._get(TOKEN_KEY)
        return token if isinstance(token, str) else None

    def revoke(self):
        """Remove token, user and pending state

        Raises:
            StorageUnavailable: If the credentials file could not be updated
        """
        try:
            self._remove(TOKEN_KEY, USER_KEY, STATE_KEY)
        except OSError as e:
            logger.error(f"Failed to revoke token: {e}")
            raise StorageUnavailable("Unable to clear saved authentication.") from e

    def is_authenticated(self) -> bool:
        """Check if a non-empty token is stored"""
        token = self.get_token()
        return token is not None and len(token) > 0

    # User profile
    def store_user(self, user: GitHubUser):
        """Persist the user profile (best-effort)"""
        try:
            self._set(USER_KEY, user.to_dict())
        except OSError as e:
            logger.error(f"Failed to store user: {e}")

    def get_user(self) -> Optional[GitHubUser]:
        """Get the stored user profile, or None if absent or malformed"""
        data = self._get(USER_KEY)
        if data is None:
            return None
        try:
            return GitHubUser.from_dict(data)
        except ValueError as e:
            logger.error(f"Failed to retrieve user: {e}")
            return None

    # CSRF state
    def store_state(self, state: str):
        """Persist the pending OAuth state parameter (best-effort)"""
        try:
            self._set(STATE_KEY, state)
        except OSError as e:
            logger.error(f"Failed to store state: {e}")

    def validate_state(self, state: str) -> bool:
        """Consume the pending state and compare it with the callback value

        The stored state is deleted whatever the outcome.

        Args:
            state: State parameter from the callback

        Returns:
            True if state matches the pending one
        """
        stored_state = self._get(STATE_KEY)
        try:
            self._remove(STATE_KEY)
        except OSError as e:
            logger.error(f"Failed to clear state: {e}")

        if not isinstance(stored_state, str) or state is None:
            return False
        return hmac.compare_digest(stored_state.encode("utf-8"), state.encode("utf-8"))

    def has_pending_state(self) -> bool:
        return isinstance(self._get(STATE_KEY), str)

    def get_status(self) -> Dict[str, Any]:
        """Get credential status without exposing secrets"""
        user = self.get_user()
        return {
            "has_token": self.is_authenticated(),
            "has_user": user is not None,
            "login": user.login if user else None,
            "pending_state": self.has_pending_state(),
            "credentials_file": str(self.credentials_path),
        }
