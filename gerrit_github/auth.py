"""
Create authenticated GitHub sessions for the webhook user.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

import requests
from urlobject import URLObject

from gerrit_github import settings
from gerrit_github.utils import memoize_timed

logger = logging.getLogger(__name__)


class BaseUrlSession(requests.Session):
    """
    A requests Session class that applies a base URL to the requested URL.
    """
    def __init__(self, base_url):
        super().__init__()
        self.base_url = URLObject(base_url)

    def request(self, method, url, data=None, headers=None, **kwargs):
        return super().request(
            method=method,
            url=self.base_url.relative(url),
            data=data,
            headers=headers,
            **kwargs
        )


def get_github_session(token: Optional[str] = None) -> requests.Session:
    """
    Get the GitHub session to use, authenticated with `token` or the
    configured personal token.
    """
    session = BaseUrlSession(base_url=settings.GITHUB_API_URL)
    session.headers["Authorization"] = f"token {token or settings.GITHUB_PERSONAL_TOKEN}"
    session.trust_env = False   # prevent reading the local .netrc
    return session


@memoize_timed(minutes=10)
def github_whoami(token: str) -> Optional[str]:
    """
    The GitHub login that owns `token`, or None if GitHub rejects it.
    """
    resp = get_github_session(token).get("/user")
    if not resp.ok:
        logger.error(f"GitHub rejected the webhook token: {resp.status_code} {resp.reason}")
        return None
    return resp.json()["login"]


@dataclasses.dataclass(frozen=True)
class WebhookSession:
    """The identity webhook handlers act as while processing one event."""
    # The Gerrit user configured as the webhook user.
    user: str

    # The GitHub login the token belongs to.
    login: str

    # An authenticated requests session for the GitHub API.
    github: requests.Session = dataclasses.field(repr=False, compare=False)

    # The token `github` is authenticated with, for work done outside the request.
    token: Optional[str] = dataclasses.field(default=None, repr=False, compare=False)


class GitHubLoginProvider:
    """
    Logs the webhook user in to GitHub.

    Each webhook request gets its own :class:`WebhookSession`, nothing is
    shared between requests except the cached ``/user`` lookup.
    """

    def __init__(self, token: Optional[str] = None):
        self.token = token

    def login(self, user: Optional[str]) -> Optional[WebhookSession]:
        """
        Returns:
            A WebhookSession, or None if `user` can't be logged in.
        """
        token = self.token or settings.GITHUB_PERSONAL_TOKEN
        if not user:
            logger.error("No webhook user configured")
            return None
        if not token:
            logger.error(f"No GitHub token configured for webhook user {user!r}")
            return None
        github_login = github_whoami(token)
        if github_login is None:
            return None
        return WebhookSession(
            user=user, login=github_login, github=get_github_session(token), token=token,
        )
