"""
The Celery worker entry point, since celery can't be given a factory
function as the application instance:

  $ celery --app=gerrit_github.worker:application worker
"""

from gerrit_github import create_celery_app

application = create_celery_app(config="worker")
