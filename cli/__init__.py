"""CLI package for Sentinel GitHub OAuth

This package provides the command-line interface for connecting a GitHub
account and running the token proxy.
"""

from cli.main import main

__all__ = [
    "main",
]
