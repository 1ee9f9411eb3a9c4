import logging

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from redis import Redis
from redis.exceptions import RedisError
from rq import Queue

logger = logging.getLogger(__name__)


class RQWrapper:
    """RQ queue that runs jobs inline when Redis is not configured or down."""

    def __init__(self):
        self.redis = None
        self.queue = None

    def init_app(self, app):
        url = app.config.get("REDIS_URL")
        if not url:
            logger.info("REDIS_URL not set, background jobs run synchronously")
            self.redis = None
            self.queue = None
            return
        self.redis = Redis.from_url(url)
        self.queue = Queue("default", connection=self.redis)

    @property
    def is_async(self):
        return self.queue is not None

    def _run_inline(self, func, args, kwargs):
        # strip RQ-only kwargs that are not valid for the function call
        rq_keys = {'job_timeout', 'timeout', 'at_front', 'depends_on', 'result_ttl', 'ttl', 'meta', 'description'}
        safe_kwargs = {k: v for k, v in kwargs.items() if k not in rq_keys}
        try:
            return func(*args, **safe_kwargs)
        except Exception:
            logger.exception("Synchronous execution of %s failed", getattr(func, "__name__", func))
            return None

    def enqueue(self, func, *args, **kwargs):
        """Return the RQ job, or the function's result when run inline."""
        if not self.queue:
            return self._run_inline(func, args, kwargs)
        try:
            return self.queue.enqueue(func, *args, **kwargs)
        except RedisError:
            logger.exception("RQ enqueue failed, falling back to sync execution")
            return self._run_inline(func, args, kwargs)


db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
rq = RQWrapper()
