"""Minimal async GitHub REST client"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import httpx

import settings
from oauth.models import GitHubUser

logger = logging.getLogger(__name__)

# Source files above 1MB are not fetched
MAX_FILE_SIZE_BYTES = 1024 * 1024
GENERATED_SUFFIXES = (".g.dart", ".freezed.dart", ".config.dart")


class GitHubAPIError(Exception):
    """GitHub API request failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class RepoFile:
    """Entry of a repository tree"""
    path: str
    type: str
    url: str
    size: Optional[int] = None


def parse_repo_url(url: str) -> Optional[Tuple[str, str]]:
    """Extract (owner, repo) from "owner/repo" or a github.com URL

    Returns:
        Tuple of (owner, repo), or None if the input is not recognised
    """
    if not url:
        return None
    trimmed = url.strip()

    simple = re.match(r"^([^/\s:]+)/([^/\s]+)$", trimmed)
    if simple and "github.com" not in simple.group(1):
        return simple.group(1), re.sub(r"\.git$", "", simple.group(2))

    to_parse = trimmed if trimmed.startswith("http") else f"https://{trimmed}"
    parsed = urlparse(to_parse)
    if not parsed.hostname or "github.com" not in parsed.hostname:
        return None
    parts = [part for part in parsed.path.split("/") if part]
    if len(parts) < 2:
        return None
    return parts[0], re.sub(r"\.git$", "", parts[1])


class GitHubClient:
    """GitHub API client authenticated with an OAuth token"""

    def __init__(
        self,
        token: Optional[str] = None,
        api_base: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self.token = token
        self.api_base = (api_base or settings.GITHUB_API_BASE).rstrip("/")
        self.timeout = settings.REQUEST_TIMEOUT if timeout is None else timeout
        self._client = client

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, headers=self._headers(), timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, headers=self._headers())

    async def fetch_user(self) -> GitHubUser:
        """Fetch the profile of the token owner

        Raises:
            GitHubAPIError: If the request fails or the payload is invalid
        """
        response = await self._get(f"{self.api_base}/user")
        if not response.is_success:
            raise GitHubAPIError("Failed to fetch user information", response.status_code)
        try:
            return GitHubUser.from_dict(response.json())
        except ValueError as e:
            raise GitHubAPIError(f"Invalid user payload: {e}", response.status_code) from e

    async def fetch_repo_tree(self, owner: str, repo: str, branch: str = "main") -> List[RepoFile]:
        """List Dart source files of a repository

        Generated files are skipped. A missing "main" branch falls back to
        "master".

        Raises:
            GitHubAPIError: If the tree cannot be listed
        """
        url = f"{self.api_base}/repos/{owner}/{repo}/git/trees/{branch}?recursive=1"
        response = await self._get(url)

        if not response.is_success:
            if response.status_code == 404 and branch == "main":
                logger.info(f"Branch 'main' not found for {owner}/{repo}, trying 'master'")
                return await self.fetch_repo_tree(owner, repo, "master")
            if response.status_code == 403:
                raise GitHubAPIError(
                    "GitHub API Rate Limit Exceeded. Please connect your GitHub account.",
                    response.status_code,
                )
            raise GitHubAPIError(
                f"GitHub API Error: {response.reason_phrase} (Check URL or Token permissions)",
                response.status_code,
            )

        entries: List[Dict[str, Any]] = response.json().get("tree", [])
        files = [
            RepoFile(
                path=entry["path"],
                type=entry.get("type", "blob"),
                url=entry.get("url", ""),
                size=entry.get("size"),
            )
            for entry in entries
            if entry.get("type") == "blob"
            and entry.get("path", "").endswith(".dart")
            and not entry["path"].endswith(GENERATED_SUFFIXES)
        ]
        logger.debug(f"Found {len(files)} Dart files in {owner}/{repo}@{branch}")
        return files

    async def fetch_file_content(self, url: str) -> str:
        """Fetch and decode a blob from its API URL

        Raises:
            GitHubAPIError: If the request fails or the encoding is unknown
        """
        response = await self._get(url)
        if not response.is_success:
            raise GitHubAPIError("Failed to fetch content", response.status_code)

        data = response.json()
        if (data.get("size") or 0) > MAX_FILE_SIZE_BYTES:
            return "// File too large."

        if data.get("encoding") == "base64":
            raw = re.sub(r"\s", "", data.get("content", ""))
            try:
                return base64.b64decode(raw).decode("utf-8", errors="replace")
            except (binascii.Error, ValueError) as e:
                raise GitHubAPIError(f"Invalid base64 content: {e}") from e
        raise GitHubAPIError("Unknown encoding")
