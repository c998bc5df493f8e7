"""Automatically run by pytest to set up test infrastructure."""

import pytest
import requests_mock

import gerrit_github
import gerrit_github.utils
from gerrit_github.auth import WebhookSession, get_github_session
from gerrit_github.config import TestingConfig
from gerrit_github.importer import PullRequestImporter

from . import settings as test_settings


@pytest.fixture
def requests_mocker():
    """Make requests_mock available as a fixture."""
    mocker = requests_mock.Mocker(real_http=False, case_sensitive=True)
    mocker.start()
    try:
        yield mocker
    finally:
        mocker.stop()


@pytest.fixture(autouse=True)
def settings_for_tests(mocker):
    for name, value in vars(test_settings).items():
        if name.isupper():
            mocker.patch(f"gerrit_github.settings.{name}", value)


@pytest.fixture(autouse=True)
def reset_all_memoized_functions():
    """Clears the values cached by @memoize_timed before each test. Applied automatically."""
    gerrit_github.utils.clear_memoized_values()


@pytest.fixture
def webhook_session():
    return WebhookSession(user="webhook-bot", login="webhook-bot-gh", github=get_github_session())


@pytest.fixture
def login_provider(mocker, webhook_session):
    provider = mocker.Mock()
    provider.login.return_value = webhook_session
    return provider


@pytest.fixture
def importer(mocker):
    return mocker.Mock(spec=PullRequestImporter)


@pytest.fixture
def importer_factory(mocker, importer):
    return mocker.Mock(return_value=importer)


@pytest.fixture
def make_app(mocker, importer_factory, login_provider):
    """
    Make a testing app, with fake collaborators, and `secret` as the
    webhook secret.
    """
    def _make_app(secret=None, **kwargs):
        mocker.patch.object(TestingConfig, "GITHUB_WEBHOOKS_SECRET", secret)
        kwargs.setdefault("importer_factory", importer_factory)
        kwargs.setdefault("login_provider", login_provider)
        return gerrit_github.create_app(config="testing", **kwargs)
    return _make_app


@pytest.fixture
def client(make_app):
    """A test client for an app with no webhook secret."""
    return make_app().test_client()
