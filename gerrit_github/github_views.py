"""
These are the views that receive webhook events coming from GitHub.
"""

import logging

from flask import current_app as app
from flask import Blueprint, jsonify, request

from gerrit_github.utils import requires_auth
from gerrit_github.webhooks import EXTENSION, IMPORTERS

github_bp = Blueprint('github_views', __name__)
logger = logging.getLogger(__name__)


@github_bp.route('/webhook', methods=('POST',))
def webhook():
    """
    Process an incoming GitHub webhook delivery.

    The event type comes from the ``X-Github-Event`` header and the
    signature from ``X-Hub-Signature``.  The body is read raw, because the
    signature covers the exact bytes GitHub sent.

    Returns:
        Tuple[str, int]: An empty body and the HTTP status code
    """
    event_name = request.headers.get("X-Github-Event")
    signature = request.headers.get("X-Hub-Signature")
    delivery = request.headers.get("X-Github-Delivery")
    body = request.get_data(cache=False)

    logger.info(f"Incoming GitHub delivery: {event_name=!r}, {delivery=!r}")
    status = app.extensions[EXTENSION].dispatch(event_name, signature, body)
    return "", status


@github_bp.route('/imports')
@requires_auth
def imports():
    """
    List the pull request import jobs, by webhook user.

    Jobs that couldn't be queued are listed too, with their error.
    """
    jobs = app.extensions[IMPORTERS].jobs()
    return jsonify({
        user: [job.as_dict() for job in user_jobs]
        for user, user_jobs in jobs.items()
    })
