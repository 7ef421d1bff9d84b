import logging
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
import redis as _redis
from rq import Queue

logger = logging.getLogger(__name__)

db = SQLAlchemy()
migrate = Migrate()

# Set by init_queue(); read through this module so late binding is seen
redis_client: _redis.Redis = None  # type: ignore
task_queue = None


class DummyQueue:
    """Stands in for the RQ queue without Redis. Jobs are dropped, not run."""

    name = "disabled"

    def enqueue(self, func, *args, **kwargs):
        logger.warning(
            "No Redis, dropping %s%r", getattr(func, "__name__", func), args[:1]
        )
        return None


def init_queue(app):
    """Connect to Redis and bind the background job queue."""
    global redis_client, task_queue
    redis_client = None
    task_queue = DummyQueue()

    redis_url = app.config.get("REDIS_URL", "")
    if not redis_url:
        logger.info("REDIS_URL not set, background jobs disabled")
        return

    client = _redis.from_url(
        redis_url, socket_connect_timeout=app.config.get("REDIS_CONNECT_TIMEOUT", 2)
    )
    try:
        client.ping()
    except _redis.RedisError as e:
        logger.warning("Redis at %s unreachable (%s), background jobs disabled", redis_url, e)
        return
    redis_client = client
    task_queue = Queue(app.config["PRE_ORDER_QUEUE"], connection=client)
