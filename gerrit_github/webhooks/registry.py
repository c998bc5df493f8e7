"""
Which handler processes which GitHub event type.

The registry is filled once, when the application is created, and frozen.
After that it is only read, so request threads share it without locking.
"""

import logging
from types import MappingProxyType
from typing import Iterable, Optional

from .handlers import PingHandler

logger = logging.getLogger(__name__)

# The event types GitHub can deliver to a webhook, as sent in the
# X-Github-Event header.
GITHUB_EVENTS = frozenset({
    "check_run",
    "check_suite",
    "commit_comment",
    "create",
    "delete",
    "deployment",
    "deployment_status",
    "fork",
    "gollum",
    "installation",
    "installation_repositories",
    "issue_comment",
    "issues",
    "label",
    "member",
    "membership",
    "milestone",
    "organization",
    "page_build",
    "ping",
    "project",
    "project_card",
    "project_column",
    "public",
    "pull_request",
    "pull_request_review",
    "pull_request_review_comment",
    "push",
    "release",
    "repository",
    "status",
    "team",
    "team_add",
    "watch",
})


def handler_name(event_type: str) -> str:
    """
    The class name a handler for `event_type` must have.

    >>> handler_name("pull_request_review")
    'PullRequestReviewHandler'
    """
    return "".join(part.capitalize() for part in event_type.split("_")) + "Handler"


class EventRegistry:
    """A mapping from event type name to the handler for it."""

    def __init__(self):
        self._handlers = {}
        self._frozen = False

    def register(self, handler):
        """
        Add `handler` under its ``EVENT_TYPE``.

        Raises:
            ValueError: for an event type GitHub doesn't send, a handler
                that doesn't follow the naming convention, a second handler
                for the same event type, or a frozen registry.
        """
        if self._frozen:
            raise ValueError("Can't register handlers after the registry is frozen")
        event_type = handler.EVENT_TYPE.lower()
        if event_type not in GITHUB_EVENTS:
            raise ValueError(f"Unknown GitHub event type: {event_type!r}")
        expected = handler_name(event_type)
        if type(handler).__name__ != expected:
            raise ValueError(f"Handler for {event_type!r} should be named {expected}, not {type(handler).__name__}")
        if event_type in self._handlers:
            raise ValueError(f"Duplicate handler for {event_type!r}")
        self._handlers[event_type] = handler
        logger.info(f"Loaded {expected} for {event_type!r}")

    def freeze(self):
        self._handlers = MappingProxyType(self._handlers)
        self._frozen = True
        return self

    def resolve(self, name: Optional[str]):
        """
        The handler for event type `name`, or None if there isn't one.
        """
        if not name:
            return None
        return self._handlers.get(name.lower())

    def event_types(self):
        return sorted(self._handlers)

    def __contains__(self, name):
        return self.resolve(name) is not None

    def __len__(self):
        return len(self._handlers)


def build_registry(handlers: Iterable) -> EventRegistry:
    """
    Make a frozen registry from `handlers`.

    A ``ping`` handler is always registered, since GitHub pings every new
    webhook to check it.
    """
    registry = EventRegistry()
    handlers = list(handlers)
    if not any(h.EVENT_TYPE.lower() == PingHandler.EVENT_TYPE for h in handlers):
        handlers.insert(0, PingHandler())
    for handler in handlers:
        registry.register(handler)
    return registry.freeze()
