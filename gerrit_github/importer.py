"""
Import GitHub pull requests, in the background.

An importer belongs to one webhook user.  Each import is queued as a
Celery task, run with the user's GitHub token, and tracked as a job.
:class:`ImporterPool` keeps one importer per webhook user for the life of
the app, so the jobs stay visible after the webhook request is over.
"""

from __future__ import annotations

import logging
import threading
import traceback
from typing import Dict, List, Optional

from gerrit_github.tasks.github import pull_request_import_task
from gerrit_github.types import PrId

logger = logging.getLogger(__name__)


class PullRequestImportJob:
    """An import that has been queued."""

    def __init__(self, idx, pr_id, import_type, result):
        self.idx = idx
        self.pr_id = pr_id
        self.import_type = import_type
        self.result = result

    @property
    def task_id(self):
        return self.result.id

    @property
    def status(self):
        return self.result.state

    def cancel(self):
        self.result.revoke()

    def as_dict(self):
        return {
            "idx": self.idx,
            "pull_request": str(self.pr_id),
            "import_type": self.import_type.value,
            "task_id": self.task_id,
            "status": self.status,
        }

    def __repr__(self):
        return f"<PullRequestImportJob {self.idx}: {self.pr_id} ({self.import_type.value})>"


class ErrorJob:
    """An import that couldn't even be queued."""

    task_id = None
    status = "FAILED"

    def __init__(self, idx, pr_id, import_type, exc):
        self.idx = idx
        self.pr_id = pr_id
        self.import_type = import_type
        self.error = "".join(traceback.format_exception_only(type(exc), exc)).strip()

    def cancel(self):
        pass

    def as_dict(self):
        return {
            "idx": self.idx,
            "pull_request": str(self.pr_id),
            "import_type": self.import_type.value,
            "task_id": self.task_id,
            "status": self.status,
            "error": self.error,
        }

    def __repr__(self):
        return f"<ErrorJob {self.idx}: {self.pr_id}: {self.error}>"


class PullRequestImporter:
    """
    Queue pull request imports for a webhook user.

    Jobs are kept per ``(idx, pull request)``: importing the same pull
    request again at the same index replaces the earlier job.

    Arguments:
        session (WebhookSession): who the imports are done for.
    """

    def __init__(self, session):
        self.session = session
        self._jobs: Dict[tuple, object] = {}
        self._lock = threading.Lock()

    def import_pull_request(self, idx, organisation, repo_name, pull_request_id, import_type):
        """
        Queue an import of `organisation`/`repo_name`#`pull_request_id`.

        Failing to queue doesn't raise: the failure is recorded as an
        :class:`ErrorJob`.
        """
        pr_id = PrId(organisation, repo_name, pull_request_id)
        try:
            result = pull_request_import_task.delay(
                organisation, repo_name, pull_request_id, import_type.value,
                token=self.session.token,
            )
            job = PullRequestImportJob(idx, pr_id, import_type, result)
            logger.debug(f"New pull request import job created: {job!r}")
        except Exception as exc:    # pylint: disable=broad-except
            logger.exception(f"Couldn't queue import of {pr_id}")
            job = ErrorJob(idx, pr_id, import_type, exc)
        self.schedule(job)
        return job

    def schedule(self, job):
        with self._lock:
            self._jobs[(job.idx, job.pr_id)] = job

    def jobs(self) -> List:
        with self._lock:
            return list(self._jobs.values())

    def cancel(self):
        for job in self.jobs():
            job.cancel()

    def reset(self):
        self.cancel()
        with self._lock:
            self._jobs.clear()


class ImporterPool:
    """
    One importer per webhook user, made on first use by `factory`.

    Called with a webhook session, like `factory` itself.  Later sessions
    of the same user replace the importer's session, so new imports use the
    latest token.
    """

    def __init__(self, factory=PullRequestImporter):
        self.factory = factory
        self._importers: Dict[str, PullRequestImporter] = {}
        self._lock = threading.Lock()

    def __call__(self, session):
        with self._lock:
            importer = self._importers.get(session.user)
            if importer is None:
                importer = self._importers[session.user] = self.factory(session)
            else:
                importer.session = session
            return importer

    def get(self, user) -> Optional[PullRequestImporter]:
        with self._lock:
            return self._importers.get(user)

    def jobs(self) -> Dict[str, List]:
        """All the jobs, by webhook user."""
        with self._lock:
            importers = dict(self._importers)
        return {user: importer.jobs() for user, importer in importers.items()}
