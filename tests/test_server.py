import pytest

import settings
from proxy import server as server_module
from proxy.server import ProxyServer


@pytest.fixture
def default_urls(monkeypatch):
    monkeypatch.setattr(settings, "GITHUB_REDIRECT_URI", "")
    monkeypatch.setattr(settings, "OAUTH_PROXY_URL", "")


def test_port_override_moves_default_oauth_urls(default_urls, store):
    server = ProxyServer(port=9000, store=store)

    assert server.oauth_config.redirect_uri == "http://localhost:9000/oauth/callback"
    assert server.oauth_config.proxy_url == "http://localhost:9000/api/oauth"

    app = server.build_app()
    assert app.state.config.proxy_url == "http://localhost:9000/api/oauth"
    assert app.state.callback_handler.config.redirect_uri == "http://localhost:9000/oauth/callback"
    assert app.state.store is store


def test_explicit_oauth_urls_survive_port_override(monkeypatch, store):
    monkeypatch.setattr(settings, "GITHUB_REDIRECT_URI", "https://sentinel.example/oauth/callback")
    monkeypatch.setattr(settings, "OAUTH_PROXY_URL", "https://sentinel.example/api/oauth")

    server = ProxyServer(port=9000, store=store)

    assert server.oauth_config.redirect_uri == "https://sentinel.example/oauth/callback"
    assert server.oauth_config.proxy_url == "https://sentinel.example/api/oauth"


def test_default_port_comes_from_settings(default_urls, monkeypatch, store):
    monkeypatch.setattr(server_module, "PORT", 8123)

    server = ProxyServer(store=store)

    assert server.port == 8123
    assert server.oauth_config.proxy_url == "http://localhost:8123/api/oauth"
