import logging
import os
import sys
import traceback

from celery import Celery
from flask import Flask
from flask_sslify import SSLify
import sentry_sdk
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.flask import FlaskIntegration
from werkzeug.middleware.proxy_fix import ProxyFix
from werkzeug.utils import import_string

__version__ = "0.1.0"

log_level = os.environ.get('LOGLEVEL', 'INFO').upper()
logger = logging.getLogger(__name__)
handler = logging.StreamHandler(sys.stderr)
handler.setLevel(log_level)
logger.addHandler(handler)
logger.setLevel(log_level)

# urllib3 logs every connection at debug-level, quiet it.
logging.getLogger("urllib3").setLevel("WARN")

celery = Celery(strict_typing=False)


def expand_config(name=None):
    if not name:
        name = "default"
    return "gerrit_github.config.{classname}Config".format(
        classname=name.capitalize(),
    )


def create_app(config=None, importer_factory=None, login_provider=None, handlers=None):
    """
    Build the Flask application.

    The collaborators the webhook handlers need can be supplied by the host:

    Arguments:
        config (str): name of a config class in ``gerrit_github.config``
        importer_factory (Callable[[WebhookSession], PullRequestImporter]):
            makes the pull request importer used for a webhook session
        login_provider (GitHubLoginProvider): logs the webhook user in
        handlers (List[WebhookEventHandler]): the event handlers to register
    """
    app = Flask(__name__)
    app.wsgi_app = ProxyFix(app.wsgi_app)   # type: ignore[method-assign]
    config = config or os.environ.get("GERRIT_GITHUB_CONFIG") or "default"
    # Instantiate the config object because we rely on the __init__
    # function to translate config between heroku and what celery wants
    config_obj = import_string(expand_config(config))()
    app.config.from_object(config_obj)

    create_celery_app(app)
    if not app.debug and not app.testing:
        SSLify(app)

    # Avoid circular imports: these modules use the celery app above.
    from .webhooks import init_webhooks
    init_webhooks(
        app,
        importer_factory=importer_factory,
        login_provider=login_provider,
        handlers=handlers,
    )

    # attach our blueprints
    from .github_views import github_bp
    app.register_blueprint(github_bp, url_prefix="/github")
    from .tasks import tasks as tasks_blueprint
    app.register_blueprint(tasks_blueprint, url_prefix="/tasks")

    return app


def create_celery_app(app=None, config="worker"):
    """
    adapted from http://flask.pocoo.org/docs/0.10/patterns/celery/
    """
    if os.environ.get("SENTRY_DSN", ""):
        sentry_sdk.init(integrations=[CeleryIntegration(), FlaskIntegration()])

    app = app or create_app(config=config)
    celery.main = app.import_name
    celery.conf.update(app.config)
    class ContextTask(celery.Task): # type: ignore[name-defined]
        abstract = True
        def __call__(self, *args, **kwargs):
            try:
                with app.app_context():
                    return self.run(*args, **kwargs)
            except Exception:
                # By default, celery will store an exception if it occurs,
                # but we don't want the exception object, we want a traceback.
                return traceback.format_exc()

    celery.Task = ContextTask
    return celery
