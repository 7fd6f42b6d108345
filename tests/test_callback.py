import pytest

from github_api import GitHubAPIError
from oauth.callback import CallbackHandler
from oauth.errors import ExchangeFailed, InvalidState, ProxyUnreachable, StorageUnavailable
from oauth.models import GitHubUser
from utils.storage import CredentialStore

pytestmark = pytest.mark.asyncio


class StubExchanger:
    def __init__(self, token="tok123", error=None):
        self.token = token
        self.error = error
        self.calls = []

    async def __call__(self, code, config):
        self.calls.append(code)
        if self.error is not None:
            raise self.error
        return self.token


async def fetch_octocat(token):
    return GitHubUser(login="octocat", name="The Octocat")


async def test_happy_path_stores_token_and_user(config, store):
    store.store_state("s1")
    exchanger = StubExchanger()
    handler = CallbackHandler(config, store, exchanger=exchanger, user_fetcher=fetch_octocat)

    token = await handler.handle_callback("abc", "s1")

    assert token == "tok123"
    assert exchanger.calls == ["abc"]
    assert store.is_authenticated()
    assert store.get_token() == "tok123"
    assert store.get_user().login == "octocat"


async def test_state_mismatch_rejects_without_exchange(config, store):
    store.store_state("s1")
    exchanger = StubExchanger()
    handler = CallbackHandler(config, store, exchanger=exchanger, user_fetcher=fetch_octocat)

    with pytest.raises(InvalidState):
        await handler.handle_callback("abc", "s2")

    assert exchanger.calls == []
    assert not store.is_authenticated()
    assert store.validate_state("s1") is False


async def test_replayed_callback_fails(config, store):
    store.store_state("s1")
    handler = CallbackHandler(config, store, exchanger=StubExchanger(), user_fetcher=fetch_octocat)
    await handler.handle_callback("abc", "s1")

    with pytest.raises(InvalidState):
        await handler.handle_callback("abc", "s1")


async def test_profile_failure_does_not_fail_login(config, store):
    async def broken_fetch(token):
        raise GitHubAPIError("Failed to fetch user information", 500)

    store.store_state("s1")
    handler = CallbackHandler(config, store, exchanger=StubExchanger(), user_fetcher=broken_fetch)

    token = await handler.handle_callback("abc", "s1")

    assert token == "tok123"
    assert store.is_authenticated()
    assert store.get_user() is None


async def test_unreachable_proxy_keeps_attempt_retryable(config, store):
    store.store_state("s1")
    handler = CallbackHandler(
        config, store, exchanger=StubExchanger(error=ProxyUnreachable()), user_fetcher=fetch_octocat
    )

    with pytest.raises(ProxyUnreachable):
        await handler.handle_callback("abc", "s1")

    assert not store.is_authenticated()
    assert store.validate_state("s1") is True


async def test_provider_failure_consumes_attempt(config, store):
    store.store_state("s1")
    handler = CallbackHandler(
        config, store, exchanger=StubExchanger(error=ExchangeFailed("bad code", 400)), user_fetcher=fetch_octocat
    )

    with pytest.raises(ExchangeFailed):
        await handler.handle_callback("abc", "s1")

    assert store.validate_state("s1") is False


async def test_token_write_failure_propagates(config, store, monkeypatch):
    store.store_state("s1")
    real_write = CredentialStore._write

    def fail_on_token(self, data):
        if "sentinel_oauth_token" in data:
            raise OSError("disk full")
        real_write(self, data)

    monkeypatch.setattr(CredentialStore, "_write", fail_on_token)
    handler = CallbackHandler(config, store, exchanger=StubExchanger(), user_fetcher=fetch_octocat)

    with pytest.raises(StorageUnavailable):
        await handler.handle_callback("abc", "s1")


async def test_connection_failure_behind_proxy_keeps_state(config, store):
    store.store_state("s1")
    handler = CallbackHandler(
        config,
        store,
        exchanger=StubExchanger(error=ExchangeFailed("All connection attempts failed", 500)),
        user_fetcher=fetch_octocat,
    )

    with pytest.raises(ExchangeFailed):
        await handler.handle_callback("abc", "s1")

    assert store.validate_state("s1") is True


async def test_default_user_fetch_uses_configured_api(config, store, monkeypatch):
    import github_api

    created = []

    class RecordingClient:
        def __init__(self, **kwargs):
            created.append(kwargs)

        async def fetch_user(self):
            return GitHubUser(login="octocat")

    monkeypatch.setattr(github_api, "GitHubClient", RecordingClient)
    store.store_state("s1")
    handler = CallbackHandler(config, store, exchanger=StubExchanger())

    await handler.handle_callback("abc", "s1")

    assert created == [{"token": "tok123", "api_base": config.api_base, "timeout": config.timeout}]
    assert store.get_user().login == "octocat"
