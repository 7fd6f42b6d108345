"""Shared utilities package for sentinel-oauth"""

from .storage import CredentialStore

__all__ = [
    "CredentialStore",
]
