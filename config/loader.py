"""Environment configuration for Sentinel OAuth

Values come from the process environment first, then from a .env file in the
working directory, then from the defaults given in settings.py.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

TRUE_VALUES = {"true", "1", "yes", "on"}


class ConfigLoader:
    """Typed lookups over the environment"""

    def __init__(self, env_path: Optional[str] = None):
        """
        Args:
            env_path: .env file to load. Defaults to '.env' in the current
                directory; a missing file is not an error.
        """
        self.env_path = Path(env_path or ".env")
        # Variables already set in the environment win over the file
        self.env_loaded = self.env_path.is_file() and load_dotenv(dotenv_path=self.env_path, override=False)
        if self.env_loaded:
            logger.debug(f"Loaded settings from {self.env_path}")

    def _coerce(self, env_var: str, raw: str, default: Any) -> Any:
        if isinstance(default, bool):
            return raw.strip().lower() in TRUE_VALUES
        for kind in (int, float):
            if isinstance(default, kind):
                try:
                    return kind(raw)
                except ValueError:
                    logger.warning(f"Ignoring {env_var}={raw!r}: expected {kind.__name__}, using {default}")
                    return default
        return raw

    def get(self, env_var: str, default: Any) -> Any:
        """Look up an environment variable, coerced to the type of the default

        Args:
            env_var: Environment variable name
            default: Value used when the variable is unset or unparseable

        Returns:
            The environment value or the default
        """
        raw = os.getenv(env_var)
        if raw is None:
            return default
        return self._coerce(env_var, raw, default)

    def get_path(self, env_var: str, default: str) -> str:
        """Look up a filesystem path and expand a leading '~'"""
        return str(Path(self.get(env_var, default)).expanduser())


_config_loader: Optional[ConfigLoader] = None


def get_config_loader() -> ConfigLoader:
    """Return the process wide ConfigLoader, creating it on first use"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
