# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
NATS request / reply worker.

Responsibilities
----------------
* Connect to the bus and, when no DATABASE_URL is configured, ask the
  ``config.get.postgres`` subject for one.
* Build the engine, the user dispatcher and the router – once.
* Subscribe every router subject and answer on the message's reply subject.

Handlers are synchronous (SQLAlchemy sessions); each message is scheduled
as its own task running the handler in a worker thread, so slow requests do
not hold up the others.
"""

import asyncio
import json

import nats
from nats.aio.client import Client as NATS
from nats.aio.msg import Msg

from core.config import Settings
from core.logger import logger
from database import make_engine, make_session_factory
from transport.router import RequestRouter
from users.dispatcher import UserDispatcher, user_handlers
from users.store import scoped_store

CONFIG_SUBJECT = "config.get.postgres"


async def fetch_database_url(nc: NATS, settings: Settings) -> str:
    """
    Request the Postgres connection details published on the bus and return
    a SQLAlchemy URL pointing at ``settings.database_name``.

    The reply looks like ``{"url": "postgres://postgres@127.0.0.1", ...}``.
    """
    msg = await nc.request(CONFIG_SUBJECT, b"", timeout=settings.config_request_timeout)
    try:
        url = json.loads(msg.data)["url"]
    except (ValueError, KeyError, TypeError) as exc:
        raise RuntimeError(f"invalid reply on {CONFIG_SUBJECT}") from exc
    if not url:
        raise RuntimeError(f"empty database url on {CONFIG_SUBJECT}")

    # SQLAlchemy only accepts the postgresql:// spelling
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return f"{url.rstrip('/')}/{settings.database_name}"


class MessageHandler:
    """
    nats-py subscription callback.

    nats-py awaits a subscription's callback before it dequeues the next
    message, so the callback only schedules a task and returns.  At most
    ``max_inflight`` handlers run at once; further tasks wait on the
    semaphore.
    """

    def __init__(self, router: RequestRouter, max_inflight: int = 64):
        self._router = router
        self._slots = asyncio.Semaphore(max_inflight)
        self.pending: set[asyncio.Task] = set()

    async def __call__(self, msg: Msg) -> None:
        task = asyncio.create_task(self._handle(msg))
        self.pending.add(task)
        task.add_done_callback(self._finished)

    async def _handle(self, msg: Msg) -> None:
        async with self._slots:
            reply = await asyncio.to_thread(self._router.handle, msg.subject, msg.data)
        if msg.reply:
            await msg.respond(reply)

    def _finished(self, task: asyncio.Task) -> None:
        self.pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("message handling failed", exc_info=exc)

    async def wait_idle(self) -> None:
        """Wait for every scheduled message to finish."""
        while self.pending:
            await asyncio.gather(*self.pending, return_exceptions=True)


def message_handler(router: RequestRouter, max_inflight: int = 64) -> MessageHandler:
    """Wrap the router as a nats-py subscription callback."""
    return MessageHandler(router, max_inflight)


async def subscribe_all(
    nc: NATS, router: RequestRouter, queue: str = "", max_inflight: int = 64
) -> MessageHandler:
    callback = message_handler(router, max_inflight)
    for subject in router.subjects:
        await nc.subscribe(subject, queue=queue, cb=callback)
        logger.info("subscribed to %s", subject)
    return callback


async def serve(settings: Settings) -> None:
    nc = await nats.connect(settings.nats_url)
    logger.info("connected to %s", settings.nats_url)

    database_url = settings.database_url or await fetch_database_url(nc, settings)
    engine = make_engine(database_url)

    dispatcher = UserDispatcher(scoped_store(make_session_factory(engine)))
    router = RequestRouter(user_handlers(dispatcher, settings.subject_prefix))

    callback = None
    try:
        callback = await subscribe_all(nc, router, settings.queue_group, settings.max_inflight)
        logger.info("user store worker ready")
        # Runs until cancelled (Ctrl-C / SIGTERM via asyncio.run)
        await asyncio.Event().wait()
    finally:
        logger.info("user store worker shutting down")
        await nc.drain()
        if callback is not None:
            await callback.wait_idle()
        engine.dispose()
