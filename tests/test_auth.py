"""Tests of logging the webhook user in to GitHub."""

import pytest
from freezegun import freeze_time

from gerrit_github.auth import GitHubLoginProvider, WebhookSession, get_github_session

from . import settings as test_settings


def test_get_github_session(requests_mocker):
    requests_mocker.get("https://api.github.com/user", json={"login": "webhook-bot-gh"})
    session = get_github_session()
    response = session.get("/user")
    headers = response.request.headers
    assert headers["Authorization"] == f"token {test_settings.GITHUB_PERSONAL_TOKEN}"
    assert response.url == "https://api.github.com/user"


def test_get_github_session_with_token(requests_mocker):
    requests_mocker.get("https://api.github.com/user", json={"login": "someone"})
    response = get_github_session("other-token").get("/user")
    assert response.request.headers["Authorization"] == "token other-token"


def test_login(requests_mocker):
    requests_mocker.get("https://api.github.com/user", json={"login": "webhook-bot-gh"})
    session = GitHubLoginProvider().login("webhook-bot")
    assert isinstance(session, WebhookSession)
    assert session.user == "webhook-bot"
    assert session.login == "webhook-bot-gh"
    assert session.github.headers["Authorization"] == f"token {test_settings.GITHUB_PERSONAL_TOKEN}"
    assert session.token == test_settings.GITHUB_PERSONAL_TOKEN


def test_login_with_own_token(requests_mocker):
    requests_mocker.get("https://api.github.com/user", json={"login": "other-gh"})
    session = GitHubLoginProvider(token="other-token").login("webhook-bot")
    assert session.login == "other-gh"
    assert session.token == "other-token"
    assert requests_mocker.last_request.headers["Authorization"] == "token other-token"


@pytest.mark.parametrize("user", [None, ""])
def test_login_no_user(requests_mocker, user):
    assert GitHubLoginProvider().login(user) is None
    assert requests_mocker.call_count == 0


def test_login_no_token(mocker, requests_mocker):
    mocker.patch("gerrit_github.settings.GITHUB_PERSONAL_TOKEN", None)
    assert GitHubLoginProvider().login("webhook-bot") is None
    assert requests_mocker.call_count == 0


def test_login_rejected_token(requests_mocker, caplog):
    requests_mocker.get("https://api.github.com/user", status_code=401, reason="Unauthorized", json={})
    assert GitHubLoginProvider().login("webhook-bot") is None
    assert "GitHub rejected the webhook token: 401 Unauthorized" in caplog.text


def test_login_lookup_is_cached(requests_mocker):
    requests_mocker.get("https://api.github.com/user", json={"login": "webhook-bot-gh"})
    provider = GitHubLoginProvider()
    with freeze_time("2024-05-14 09:00:00"):
        first = provider.login("webhook-bot")
        second = provider.login("webhook-bot")
        assert requests_mocker.call_count == 1
        # Each login is its own session.
        assert first is not second
        assert first == second

    with freeze_time("2024-05-14 09:11:00"):
        provider.login("webhook-bot")
        assert requests_mocker.call_count == 2
