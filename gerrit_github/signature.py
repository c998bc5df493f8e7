"""
Check the signature GitHub puts on webhook deliveries.

GitHub signs each delivery with the webhook's shared secret and sends the
result in the ``X-Hub-Signature`` header as ``sha1=<hex digest>``.

.. _Validating payloads from GitHub:
    https://docs.github.com/en/webhooks/using-webhooks/validating-webhook-deliveries
"""

import hmac
import logging
import re
from hashlib import sha1
from typing import Optional

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha1="

# A SHA-1 digest is 20 bytes: exactly 40 hex digits, nothing else.
HEX_DIGEST = re.compile(r"[0-9a-fA-F]{40}")


def sign_payload(secret: str, payload: bytes) -> str:
    """
    Compute the signature header value for `payload`.

    Arguments:
        secret (str): The shared secret
        payload (bytes): The raw request body

    Returns:
        str: ``sha1=`` followed by the lowercase hex digest
    """
    mac = hmac.new(secret.encode(), msg=payload, digestmod=sha1)
    return SIGNATURE_PREFIX + mac.hexdigest()


def verify_signature(secret: Optional[str], signature: Optional[str], payload: bytes) -> bool:
    """
    Ensure payload is valid according to signature.

    Make sure the payload hashes to the signature as calculated using
    the shared secret.  The digest is computed over the raw bytes of the
    request, so this must be called before the body is parsed.

    Arguments:
        secret (str): The shared secret.  If it is empty, every payload is
            accepted.
        signature (str): Signature as calculated by the server, sent in
            the request
        payload (bytes): The request payload

    Returns:
        bool: Is the payload legit?
    """
    if not secret:
        logger.debug("GITHUB_WEBHOOKS_SECRET not configured. Skip signature validation")
        return True

    if not signature or not signature.startswith(SIGNATURE_PREFIX):
        logger.error(f"Unsupported webhook signature type: {signature!r}")
        return False

    hexdigest = signature[len(SIGNATURE_PREFIX):]
    if not HEX_DIGEST.fullmatch(hexdigest):
        logger.error(f"Invalid signature: {signature!r}")
        return False

    provided = bytes.fromhex(hexdigest)
    expected = hmac.new(secret.encode(), msg=payload, digestmod=sha1).digest()
    return hmac.compare_digest(provided, expected)
