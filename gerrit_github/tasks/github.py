"""
Queuable background tasks to import pull requests.
"""

from typing import Dict

from gerrit_github import celery
from gerrit_github.auth import get_github_session
from gerrit_github.tasks import logger
from gerrit_github.types import PrId, PullRequestImportType
from gerrit_github.utils import (
    log_check_response,
    log_rate_limit,
    paginated_get,
    retry_get,
    sentry_extra_context,
)


@celery.task(bind=True)
def pull_request_import_task(task, organisation, repo_name, number, import_type, token=None):
    """
    A bound Celery task to call pull_request_import.

    `token` is the GitHub token of the webhook session that queued the
    import, so the import runs as the same GitHub identity.
    """
    pr_id = PrId(organisation, repo_name, number)
    sentry_extra_context({"pull_request": str(pr_id)})
    task.update_state(state="STARTED", meta={"pull_request": str(pr_id)})
    session = get_github_session(token)
    try:
        result = pull_request_import(pr_id, PullRequestImportType(import_type), session=session)
        log_rate_limit(session)
    except Exception:
        logger.exception(f"Couldn't import {pr_id}")
        raise
    return result


def pull_request_import(pr_id: PrId, import_type: PullRequestImportType, session=None) -> Dict:
    """
    Collect what is needed to turn a pull request into Gerrit changes.

    For ``COMMITS`` every commit of the pull request is listed, for
    ``SQUASH`` only its head.

    Returns:
        A dict describing the pull request and the commits to import.
    """
    session = session or get_github_session()
    logger.info(f"Importing {pr_id} ({import_type.value})...")

    pr_resp = retry_get(session, f"/repos/{pr_id.full_name}/pulls/{pr_id.number}")
    log_check_response(pr_resp)
    pr = pr_resp.json()
    head = pr["head"]["sha"]

    if import_type == PullRequestImportType.SQUASH:
        commits = [head]
    else:
        commits_url = f"/repos/{pr_id.full_name}/pulls/{pr_id.number}/commits"
        commits = [c["sha"] for c in paginated_get(commits_url, session=session)]

    logger.info(f"{pr_id}: {len(commits)} commit(s) to import")
    return {
        "pull_request": str(pr_id),
        "title": pr["title"],
        "head": head,
        "commits": commits,
        "import_type": import_type.value,
    }
