import httpx
import pytest

from oauth.callback import CallbackHandler
from oauth.callback_flow import CallbackStatus, CallbackViewModel
from oauth.errors import ExchangeFailed, InvalidState, ProxyUnreachable, is_retryable_error
from oauth.models import GitHubUser


class StubHandler:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def handle_callback(self, code, state):
        self.calls.append((code, state))
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.mark.asyncio
async def test_access_denied_short_circuits(fake_sleep):
    handler = StubHandler("tok")
    redirects = []
    view_model = CallbackViewModel(
        handler, {"error": "access_denied"}, sleep=fake_sleep, on_redirect=lambda url, delay: redirects.append((url, delay))
    )

    status = await view_model.run()

    assert status is CallbackStatus.FAILED
    assert handler.calls == []
    assert "cancelled" in view_model.message
    assert view_model.redirect == ("/", 2.0)
    assert redirects == [("/", 2.0)]


@pytest.mark.asyncio
@pytest.mark.parametrize("query", [{"code": "abc"}, {"state": "s1"}, {}])
async def test_missing_parameters_fail(query, fake_sleep):
    handler = StubHandler("tok")
    view_model = CallbackViewModel(handler, query, sleep=fake_sleep)

    status = await view_model.run()

    assert status is CallbackStatus.FAILED
    assert handler.calls == []
    assert view_model.message == "Invalid authorization response. Redirecting..."
    assert view_model.redirect == ("/", 2.0)


@pytest.mark.asyncio
async def test_success_redirects_after_short_delay(fake_sleep):
    handler = StubHandler("tok")
    view_model = CallbackViewModel(handler, {"code": "abc", "state": "s1"}, sleep=fake_sleep)

    status = await view_model.run()

    assert status is CallbackStatus.SUCCESS
    assert handler.calls == [("abc", "s1")]
    assert view_model.redirect == ("/", 1.5)
    assert fake_sleep.delays == []


@pytest.mark.asyncio
async def test_network_errors_exhaust_retry_budget(fake_sleep):
    handler = StubHandler(ProxyUnreachable())
    view_model = CallbackViewModel(handler, {"code": "abc", "state": "s1"}, sleep=fake_sleep)

    status = await view_model.run()

    assert status is CallbackStatus.FAILED
    assert len(handler.calls) == 4
    assert fake_sleep.delays == [1, 2, 4]
    assert view_model.retry_count == 3
    assert view_model.message == "Failed after 3 attempts. Redirecting..."
    assert view_model.redirect == ("/", 3.0)


@pytest.mark.asyncio
async def test_retry_then_success(fake_sleep):
    handler = StubHandler(ProxyUnreachable(), "tok")
    view_model = CallbackViewModel(handler, {"code": "abc", "state": "s1"}, sleep=fake_sleep)

    status = await view_model.run()

    assert status is CallbackStatus.SUCCESS
    assert len(handler.calls) == 2
    assert fake_sleep.delays == [1]


@pytest.mark.asyncio
async def test_non_retryable_error_fails_immediately(fake_sleep):
    handler = StubHandler(InvalidState())
    view_model = CallbackViewModel(handler, {"code": "abc", "state": "s1"}, sleep=fake_sleep)

    status = await view_model.run()

    assert status is CallbackStatus.FAILED
    assert len(handler.calls) == 1
    assert view_model.message == InvalidState.default_message
    assert view_model.redirect == ("/", 3.0)


@pytest.mark.asyncio
async def test_message_based_classification(fake_sleep):
    handler = StubHandler(RuntimeError("network unreachable"), RuntimeError("something else broke"))
    view_model = CallbackViewModel(handler, {"code": "abc", "state": "s1"}, sleep=fake_sleep)

    status = await view_model.run()

    assert status is CallbackStatus.FAILED
    assert len(handler.calls) == 2
    assert view_model.message == "something else broke"


@pytest.mark.asyncio
async def test_real_handler_retries_after_unreachable_proxy(config, store, fake_sleep):
    calls = []

    async def unreachable(code, config):
        calls.append(code)
        raise ProxyUnreachable()

    async def fetch_user(token):
        return GitHubUser(login="octocat")

    store.store_state("s1")
    handler = CallbackHandler(config, store, exchanger=unreachable, user_fetcher=fetch_user)
    view_model = CallbackViewModel(handler, {"code": "abc", "state": "s1"}, sleep=fake_sleep)

    status = await view_model.run()

    assert status is CallbackStatus.FAILED
    assert calls == ["abc"] * 4
    assert not store.is_authenticated()


@pytest.mark.asyncio
async def test_real_handler_provider_failure_is_not_retried(config, store, fake_sleep):
    calls = []

    async def rejected(code, config):
        calls.append(code)
        raise ExchangeFailed("Failed to exchange authorization code for access token", 401)

    store.store_state("s1")
    handler = CallbackHandler(config, store, exchanger=rejected)
    view_model = CallbackViewModel(handler, {"code": "abc", "state": "s1"}, sleep=fake_sleep)

    status = await view_model.run()

    assert status is CallbackStatus.FAILED
    assert calls == ["abc"]
    assert fake_sleep.delays == []


@pytest.mark.asyncio
async def test_real_handler_retries_connection_failure_reported_by_proxy(config, store, fake_sleep):
    attempts = []

    async def flaky(code, config):
        attempts.append(code)
        if len(attempts) == 1:
            raise ExchangeFailed("All connection attempts failed", 500)
        return "gho_abc"

    async def fetch_user(token):
        return GitHubUser(login="octocat")

    store.store_state("s1")
    handler = CallbackHandler(config, store, exchanger=flaky, user_fetcher=fetch_user)
    view_model = CallbackViewModel(handler, {"code": "abc", "state": "s1"}, sleep=fake_sleep)

    status = await view_model.run()

    assert status is CallbackStatus.SUCCESS
    assert attempts == ["abc", "abc"]
    assert fake_sleep.delays == [1]
    assert store.get_token() == "gho_abc"


@pytest.mark.asyncio
async def test_persistent_proxy_connection_failure_never_reports_invalid_state(config, store, fake_sleep):
    attempts = []

    async def unreachable_github(code, config):
        attempts.append(code)
        raise ExchangeFailed("All connection attempts failed", 500)

    store.store_state("s1")
    handler = CallbackHandler(config, store, exchanger=unreachable_github)
    view_model = CallbackViewModel(handler, {"code": "abc", "state": "s1"}, sleep=fake_sleep)

    status = await view_model.run()

    assert status is CallbackStatus.FAILED
    assert attempts == ["abc"] * 4
    assert fake_sleep.delays == [1, 2, 4]
    assert view_model.message == "Failed after 3 attempts. Redirecting..."
    assert store.has_pending_state()

def test_retryable_classification():
    request = httpx.Request("POST", "http://localhost/api/oauth")

    assert is_retryable_error(ProxyUnreachable())
    assert is_retryable_error(httpx.ConnectError("refused", request=request))
    assert is_retryable_error(RuntimeError("Request Timeout"))
    assert not is_retryable_error(InvalidState())
    assert not is_retryable_error(ExchangeFailed("bad code", 400))
