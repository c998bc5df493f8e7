r"""
Handlers for GitHub webhook events.

Each handler processes one `event\_type`_, as delivered in the
``X-Github-Event`` header, and implements:

-  ``EVENT_TYPE``: the event type name.
-  ``PAYLOAD_TYPE``: the payload model the body is decoded into.
-  ``act(payload, session)``: process the event as the webhook user.
   Returns True if the event was acted on.

Handlers keep no per-request state, so one instance serves every request
thread.  A handler class must be named after its event type, see
:func:`~gerrit_github.webhooks.registry.handler_name`.

.. _event\_type: https://docs.github.com/en/webhooks/webhook-events-and-payloads
"""

import logging

from ..types import PullRequestImportType
from .payloads import PingPayload, PullRequestPayload

logger = logging.getLogger(__name__)


class WebhookEventHandler:
    EVENT_TYPE = None
    PAYLOAD_TYPE = None

    def act(self, payload, session):
        raise NotImplementedError


class PingHandler(WebhookEventHandler):
    """GitHub checking that the webhook is configured."""
    EVENT_TYPE = "ping"
    PAYLOAD_TYPE = PingPayload

    def act(self, payload, session):
        logger.info(f"Ping [zen={payload.zen!r}, hook_id={payload.hook_id}]")
        return True


# Pull request actions that mean there are new commits to import.
IMPORT_ACTIONS = {"opened", "synchronize"}


class PullRequestHandler(WebhookEventHandler):
    """
    Import pull requests when they are opened or pushed to.

    Arguments:
        importer_factory (Callable[[WebhookSession], PullRequestImporter]):
            makes the importer to use for the webhook user's session.
    """
    EVENT_TYPE = "pull_request"
    PAYLOAD_TYPE = PullRequestPayload

    def __init__(self, importer_factory):
        self.importer_factory = importer_factory

    def act(self, payload, session):
        if payload.action not in IMPORT_ACTIONS:
            logger.debug(f"Ignoring pull request action {payload.action!r}")
            return False

        repository = payload.repository
        organisation = repository.owner.login
        name = repository.name
        number = payload.number
        importer = self.importer_factory(session)
        logger.info(f"Importing {organisation}/{name}#{number}")
        importer.import_pull_request(
            0, organisation, name, number, PullRequestImportType.COMMITS,
        )
        logger.info(f"Imported {organisation}/{name}#{number}")
        return True
