"""CSRF state parameter generation"""

import secrets

from .errors import EntropyUnavailable

# 32 bytes of entropy, 64 hex characters
STATE_BYTES = 32


def generate_state() -> str:
    """Generate a cryptographically secure random state parameter

    Returns:
        Lowercase hex string of 64 characters

    Raises:
        EntropyUnavailable: If the OS random source cannot be used
    """
    try:
        return secrets.token_hex(STATE_BYTES)
    except (NotImplementedError, OSError) as e:
        raise EntropyUnavailable() from e
