"""Tests of the event type registry."""

import pytest

from gerrit_github.webhooks.handlers import (
    PingHandler, PullRequestHandler, WebhookEventHandler,
)
from gerrit_github.webhooks.payloads import Payload
from gerrit_github.webhooks.registry import (
    EventRegistry, GITHUB_EVENTS, build_registry, handler_name,
)


class PushHandler(WebhookEventHandler):
    EVENT_TYPE = "push"
    PAYLOAD_TYPE = Payload

    def act(self, payload, session):
        return True


class PushEventHandler(PushHandler):
    """Named wrong for its event type."""


class NoSuchEventHandler(WebhookEventHandler):
    EVENT_TYPE = "no_such_event"
    PAYLOAD_TYPE = Payload


@pytest.fixture
def pr_handler(importer_factory):
    return PullRequestHandler(importer_factory)


@pytest.mark.parametrize("event_type, name", [
    ("ping", "PingHandler"),
    ("push", "PushHandler"),
    ("pull_request", "PullRequestHandler"),
    ("pull_request_review_comment", "PullRequestReviewCommentHandler"),
])
def test_handler_name(event_type, name):
    assert handler_name(event_type) == name


def test_builtin_handlers_follow_naming():
    for handler_class in (PingHandler, PullRequestHandler):
        assert handler_class.EVENT_TYPE in GITHUB_EVENTS
        assert handler_class.__name__ == handler_name(handler_class.EVENT_TYPE)


def test_resolve(pr_handler):
    registry = build_registry([pr_handler])
    assert registry.resolve("pull_request") is pr_handler
    # Asking again gives the same answer.
    assert registry.resolve("pull_request") is pr_handler
    assert registry.resolve("pull_request") is registry.resolve("pull_request")


@pytest.mark.parametrize("name", ["PULL_REQUEST", "Pull_Request", "pull_REQUEST"])
def test_resolve_ignores_case(pr_handler, name):
    registry = build_registry([pr_handler])
    assert registry.resolve(name) is pr_handler


@pytest.mark.parametrize("name", [
    None, "", "unknown_event", "push", "issue_comment", "pull_request ", "pull-request",
])
def test_resolve_unregistered(pr_handler, name):
    registry = build_registry([pr_handler])
    assert registry.resolve(name) is None
    assert name not in registry


def test_ping_is_always_registered():
    registry = build_registry([])
    assert isinstance(registry.resolve("ping"), PingHandler)
    assert registry.event_types() == ["ping"]


def test_supplied_ping_handler_is_used():
    ping = PingHandler()
    registry = build_registry([ping])
    assert registry.resolve("ping") is ping
    assert len(registry) == 1


def test_own_ping_handler_in_capitals():
    class PingHandler(WebhookEventHandler):
        EVENT_TYPE = "PING"
        PAYLOAD_TYPE = Payload

    ping = PingHandler()
    registry = build_registry([ping])
    assert registry.resolve("ping") is ping
    assert len(registry) == 1


def test_extra_handlers(pr_handler):
    push = PushHandler()
    registry = build_registry([pr_handler, push])
    assert registry.event_types() == ["ping", "pull_request", "push"]
    assert registry.resolve("push") is push


def test_duplicate_handler(pr_handler, importer_factory):
    with pytest.raises(ValueError, match="Duplicate handler for 'pull_request'"):
        build_registry([pr_handler, PullRequestHandler(importer_factory)])


def test_unknown_event_type():
    with pytest.raises(ValueError, match="Unknown GitHub event type: 'no_such_event'"):
        build_registry([NoSuchEventHandler()])


def test_misnamed_handler():
    with pytest.raises(ValueError, match="should be named PushHandler, not PushEventHandler"):
        build_registry([PushEventHandler()])


def test_frozen_registry_cant_change(pr_handler):
    registry = build_registry([pr_handler])
    with pytest.raises(ValueError, match="frozen"):
        registry.register(PushHandler())
    assert registry.resolve("push") is None


def test_unfrozen_registry():
    registry = EventRegistry()
    registry.register(PushHandler())
    assert isinstance(registry.resolve("push"), PushHandler)
    assert registry.resolve("ping") is None
