"""
Receive GitHub webhook deliveries.

Subpackages and modules:

-  ``registry``: which handler processes which event type.
-  ``payloads``: typed views of the event bodies.
-  ``handlers``: what is done for each event type.
-  ``dispatcher``: authenticate a delivery and call its handler.
"""

import logging

from ..auth import GitHubLoginProvider
from ..importer import ImporterPool, PullRequestImporter
from .dispatcher import WebhookDispatcher
from .handlers import PingHandler, PullRequestHandler
from .registry import build_registry

logger = logging.getLogger(__name__)

EXTENSION = "gerrit_github"
IMPORTERS = "gerrit_github.importers"


def default_handlers(importer_factory):
    """The handlers registered when the host doesn't supply its own."""
    return [
        PingHandler(),
        PullRequestHandler(importer_factory),
    ]


def init_webhooks(app, importer_factory=None, login_provider=None, handlers=None):
    """
    Build the webhook dispatcher for `app`, and store it in ``app.extensions``.

    The importers made by `importer_factory` are kept per webhook user for
    the life of the app, under ``app.extensions[IMPORTERS]``.
    """
    importer_factory = ImporterPool(importer_factory or PullRequestImporter)
    app.extensions[IMPORTERS] = importer_factory
    if handlers is None:
        handlers = default_handlers(importer_factory)
    registry = build_registry(handlers)

    secret = app.config.get("GITHUB_WEBHOOKS_SECRET")
    if not secret:
        logger.warning(
            "GITHUB_WEBHOOKS_SECRET is not configured: "
            "webhook deliveries will be accepted without authentication"
        )

    app.extensions[EXTENSION] = WebhookDispatcher(
        registry=registry,
        secret=secret,
        webhook_user=app.config.get("GITHUB_WEBHOOK_USER"),
        login_provider=login_provider or GitHubLoginProvider(),
    )
    return app.extensions[EXTENSION]
