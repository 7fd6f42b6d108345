from typing import List

import pytest

from oauth.models import OAuthConfig
from utils.storage import CredentialStore


@pytest.fixture
def store(tmp_path) -> CredentialStore:
    return CredentialStore(str(tmp_path / "credentials" / "credentials.json"))


@pytest.fixture
def config() -> OAuthConfig:
    return OAuthConfig(
        client_id="client-123",
        redirect_uri="http://localhost:8080/oauth/callback",
        scopes=("repo", "read:user"),
        proxy_url="http://localhost:8080/api/oauth",
        timeout=5.0,
    )


class RecordingSleep:
    """Async sleep replacement that records requested delays"""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()

