import pytest

from eventdesk.utils.runtime import dev_mode_active, dev_sign_in_hosts, invitation_ttl_days
from eventdesk.utils.urls import (
    build_abstract_management_link,
    build_accept_invitation_link,
    build_public_event_link,
    get_app_base_url,
)


def test_dev_mode_active_false_when_disabled(monkeypatch):
    monkeypatch.delenv("DEV_MODE", raising=False)
    assert dev_mode_active() is False


def test_dev_mode_active_true_for_localhost(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "http://localhost:3000")
    assert dev_mode_active() is True


def test_dev_mode_active_raises_for_remote_host(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "https://events.example.com")
    with pytest.raises(RuntimeError):
        dev_mode_active()


def test_dev_mode_allowed_hosts_extend_whitelist(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "https://staging.internal")
    monkeypatch.setenv("DEV_MODE_ALLOWED_HOSTS", "staging.internal, other.local")
    assert dev_mode_active() is True


def test_dev_mode_without_app_base_requires_allow(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.delenv("ALLOW_DEV_MODE", raising=False)
    monkeypatch.delenv("PYTEST_CURRENT_TEST", raising=False)
    with pytest.raises(RuntimeError):
        dev_mode_active()

    monkeypatch.setenv("ALLOW_DEV_MODE", "true")
    assert dev_mode_active() is True


def test_dev_mode_accepts_base_url_without_scheme(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "LocalHost:3000")
    assert dev_mode_active() is True


def test_dev_sign_in_hosts(monkeypatch):
    monkeypatch.delenv("DEV_MODE_ALLOWED_HOSTS", raising=False)
    assert dev_sign_in_hosts() == {"localhost", "127.0.0.1", "::1"}
    monkeypatch.setenv("DEV_MODE_ALLOWED_HOSTS", " Web , ,api")
    assert {"web", "api"} <= dev_sign_in_hosts()


@pytest.mark.parametrize("raw,expected", [(None, 7), ("3", 3), ("0", 1), ("soon", 7)])
def test_invitation_ttl_days(monkeypatch, raw, expected):
    if raw is not None:
        monkeypatch.setenv("INVITATION_TTL_DAYS", raw)
    assert invitation_ttl_days() == expected


def test_base_url_precedence(monkeypatch):
    assert get_app_base_url() == "http://localhost:3000"

    monkeypatch.setenv("APP_HOST", "events.example.com")
    assert get_app_base_url() == "https://events.example.com"

    monkeypatch.setenv("APP_HOST", "localhost:8080")
    assert get_app_base_url() == "http://localhost:8080"

    monkeypatch.setenv("APP_BASE_URL", "https://desk.example.org/")
    assert get_app_base_url() == "https://desk.example.org"


def test_links(monkeypatch):
    monkeypatch.setenv("APP_BASE_URL", "https://desk.example.org")
    assert (
        build_accept_invitation_link(token="abc", email="ada@example.com")
        == "https://desk.example.org/accept-invitation?token=abc&email=ada%40example.com"
    )
    assert build_public_event_link("pycon-2026") == "https://desk.example.org/e/pycon-2026"
    assert (
        build_abstract_management_link("pycon-2026", "abs_1_x")
        == "https://desk.example.org/e/pycon-2026/abstract/abs_1_x"
    )
