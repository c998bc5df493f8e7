"""
Generic utilities.
"""

import os
import time
from functools import wraps
from time import sleep as retry_sleep   # so that we can patch it for tests.

import cachetools.func
import requests
import sentry_sdk
from flask import request, Response
from urlobject import URLObject

from gerrit_github import logger


def _check_auth(username, password):
    """
    Checks if a username / password combination is valid.
    """
    return (
        username == os.environ.get('HTTP_BASIC_AUTH_USERNAME') and
        password == os.environ.get('HTTP_BASIC_AUTH_PASSWORD')
    )

def _authenticate():
    """
    Sends a 401 response that enables basic auth
    """
    return Response(
        'Could not verify your access level for that URL.\n'
        'You have to login with proper credentials', 401,
        {'WWW-Authenticate': 'Basic realm="Login Required"'}
    )

def requires_auth(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        auth = request.authorization
        if not auth or not _check_auth(auth.username, auth.password):
            return _authenticate()
        return f(*args, **kwargs)
    return decorated


class RequestFailed(Exception):
    pass

def log_check_response(response, raise_for_status=True):
    """
    Logs HTTP request and response at debug level and checks if it succeeded.

    Arguments:
        response (requests.Response)
        raise_for_status (bool): if True, call raise_for_status on the response
            also.
    """
    msg = "Request: {0.method} {0.url}: {0.body!r}".format(response.request)
    logger.debug(msg)
    msg = "Response: {0.status_code} {0.reason!r} for {0.url}".format(response)
    logger.debug(msg)
    if raise_for_status:
        try:
            response.raise_for_status()
        except Exception as exc:
            req = response.request
            raise RequestFailed(f"HTTP request failed: {req.method} {req.url}. Response body: {response.content}") from exc


def log_rate_limit(session):
    """Get stats from GitHub about the current rate limit, and log them."""
    rate = session.get("/rate_limit").json()['rate']
    reset = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(rate['reset']))
    logger.info(f"Rate limit: {rate['limit']}, used {rate['used']}, remaining {rate['remaining']}. Reset is at {reset}")


def text_summary(text, length=40):
    """
    Make a summary of `text`, at most `length` chars long.

    The middle will be elided if needed.
    """
    if len(text) <= length:
        return text
    else:
        start = (length - 3) // 2
        end = length - 3 - start
        return text[:start] + "..." + text[-end:]


def retry_get(session, url, **kwargs):
    """
    Get a URL, but retry if it returns a 404.

    GitHub has been known to send us a pull request event, and then return a
    404 when we ask for the pull request itself.  This will retry with a
    pause to get the real answer.
    """
    tries = 10
    while True:
        resp = session.get(url, **kwargs)
        if resp.status_code == 404:
            tries -= 1
            if tries == 0:
                break
            retry_sleep(.5)
            continue
        else:
            break
    return resp


def paginated_get(url, session=None, limit=None, per_page=100, **kwargs):
    """
    Retrieve all objects from a paginated API.

    Assumes that the pagination is specified in the "link" header, like
    Github's v3 API.

    The `limit` describes how many results you'd like returned.  You might get
    more than this, but you won't make more requests to the server once this
    limit has been exceeded.
    """
    url = URLObject(url).set_query_param('per_page', str(per_page))
    limit = limit or 999999999
    session = session or requests.Session()
    returned = 0
    while url:
        resp = retry_get(session, url, **kwargs)
        log_check_response(resp)
        for item in resp.json():
            yield item
            returned += 1
        url = None
        if resp.links and returned < limit:
            url = resp.links.get("next", {}).get("url", "")


# A list of all the memoized functions, so that `clear_memoized_values` can
# clear them all.
_memoized_functions = []

def memoize_timed(minutes):
    """Cache the value of a function for `minutes` minutes."""
    def _timed(func):
        # We use time.time as the timer so that freezegun can test it, and in a
        # new function so that freezegun's patching will work.  Freezegun doesn't
        # patch time.monotonic, and we aren't that picky about the time anyway.
        def patchable_timer():
            return time.time()
        func = cachetools.func.ttl_cache(ttl=60 * minutes, timer=patchable_timer)(func)
        _memoized_functions.append(func)
        return func
    return _timed

def clear_memoized_values():
    """Clear all the values saved by @memoize_timed, to ensure isolated tests."""
    for func in _memoized_functions:
        func.cache_clear()


def sentry_extra_context(data_dict):
    """Apply the keys and values from data_dict to the Sentry extra context."""
    for key, value in data_dict.items():
        sentry_sdk.set_extra(key, value)
