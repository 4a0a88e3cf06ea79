# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
FastAPI HTTP gateway.

Responsibilities
----------------
* Expose every router subject as ``POST /rpc/{subject}`` so the same
  request / reply protocol can be driven without a NATS server (local
  tooling, smoke tests, load balancers that only speak HTTP).
* Log every inbound request.
* Expose a /health endpoint for container liveness checks.

The request body is passed to the handler untouched and the handler's reply
bytes are returned untouched – sentinels included, always with HTTP 200.
Only an unknown subject is an HTTP-level error (404).
"""

import time

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from core.config import settings
from core.errors import UnknownSubjectError
from core.logger import logger
from database import make_engine, make_session_factory
from transport.router import RequestRouter
from users.dispatcher import UserDispatcher, user_handlers
from users.store import scoped_store


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs method, path, client IP, status and latency.  Bodies are NOT echoed –
# set requests carry plaintext passwords.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            client_ip,
            response.status_code,
            elapsed_ms,
        )
        return response


def create_app(router: RequestRouter) -> FastAPI:
    app = FastAPI(title="User Store", version="1.0.0")
    app.add_middleware(_RequestLogMiddleware)

    # Handlers block on the database: run them in the threadpool so requests
    # proceed concurrently like on the NATS worker.
    @app.post("/rpc/{subject}")
    async def rpc(subject: str, request: Request):
        body = await request.body()
        try:
            reply = await run_in_threadpool(router.handle, subject, body)
        except UnknownSubjectError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown subject")
        return Response(content=reply, media_type="application/json")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.on_event("startup")
    async def _on_startup():
        logger.info("User store gateway starting up (subjects: %s)", ", ".join(router.subjects))

    @app.on_event("shutdown")
    async def _on_shutdown():
        logger.info("User store gateway shutting down")

    return app


def _default_router() -> RequestRouter:
    engine = make_engine(settings.database_url)
    dispatcher = UserDispatcher(scoped_store(make_session_factory(engine)))
    return RequestRouter(user_handlers(dispatcher, settings.subject_prefix))


# ``uvicorn main:app`` – needs DATABASE_URL, unlike the NATS worker
app = create_app(_default_router())
