"""
Authenticate incoming webhook deliveries and hand them to their handler.
"""

import logging

import sentry_sdk

from ..signature import verify_signature
from ..utils import sentry_extra_context, text_summary
from .payloads import decode_payload, DecodeError

logger = logging.getLogger(__name__)

OK = 204
BAD_REQUEST = 400
NOT_FOUND = 404
SERVER_ERROR = 500


class WebhookDispatcher:
    """
    Process one webhook delivery at a time, on the caller's thread.

    Arguments:
        registry (EventRegistry): the frozen handler registry
        secret (str): the shared webhook secret, empty to skip checking
        webhook_user (str): the Gerrit user handlers act as
        login_provider (GitHubLoginProvider): logs `webhook_user` in
    """

    def __init__(self, registry, secret, webhook_user, login_provider):
        self.registry = registry
        self.secret = secret
        self.webhook_user = webhook_user
        self.login_provider = login_provider

    def dispatch(self, event_name, signature, body: bytes) -> int:
        """
        Process a delivery.

        1.  Find the handler for `event_name`, else 404.
        2.  Make sure `body` hashes to `signature`, else 400.
        3.  Decode `body` into the handler's payload type, else 400.
        4.  Log the webhook user in, else 500.
        5.  Let the handler act, and answer 204.

        Returns:
            int: the HTTP status code to respond with.
        """
        handler = self.registry.resolve(event_name)
        if handler is None:
            logger.info(f"No handler for event {event_name!r}")
            return NOT_FOUND

        sentry_extra_context({"event_type": event_name})
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Incoming GitHub {event_name} event: {text_summary(body.decode('utf-8', 'replace'), 200)}")

        if not verify_signature(self.secret, signature, body):
            logger.error("Signature mismatch to the payload")
            return BAD_REQUEST

        try:
            payload = decode_payload(body, handler.PAYLOAD_TYPE)
        except DecodeError:
            logger.exception(f"Invalid {event_name} payload")
            return BAD_REQUEST

        try:
            session = self.login_provider.login(self.webhook_user)
            if session is None:
                logger.error(
                    f"Cannot login to GitHub as {self.webhook_user!r}. "
                    "Is GITHUB_WEBHOOK_USER correctly configured?"
                )
                return SERVER_ERROR

            acted = handler.act(payload, session)
        except Exception as exc:    # pylint: disable=broad-except
            logger.exception(f"Failed handling {event_name} event")
            sentry_sdk.capture_exception(exc)
            return SERVER_ERROR

        logger.info(f"Handled {event_name} event, {'acted' if acted else 'nothing to do'}")
        return OK
