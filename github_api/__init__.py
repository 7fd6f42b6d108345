"""GitHub REST API access with the stored OAuth token"""

from .client import (
    GitHubAPIError,
    GitHubClient,
    RepoFile,
    parse_repo_url,
)

__all__ = [
    "GitHubAPIError",
    "GitHubClient",
    "RepoFile",
    "parse_repo_url",
]
