# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Generic subject router shared by every transport.

The subject → handler mapping is built once at startup and never changes.
Handlers are plain ``bytes -> bytes`` callables.  Only the subject, payload
size and latency are logged – payloads may hold passwords.
"""

import time
from typing import Callable, Dict, List, Mapping

from core.errors import UnknownSubjectError
from core.logger import logger

Handler = Callable[[bytes], bytes]


class RequestRouter:
    def __init__(self, handlers: Mapping[str, Handler]):
        self._handlers: Dict[str, Handler] = dict(handlers)

    @property
    def subjects(self) -> List[str]:
        return sorted(self._handlers)

    def handle(self, subject: str, data: bytes) -> bytes:
        handler = self._handlers.get(subject)
        if handler is None:
            raise UnknownSubjectError(f"no handler for subject {subject!r}")

        start = time.perf_counter()
        reply = handler(data)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "%s | request=%dB reply=%dB latency=%.1fms",
            subject,
            len(data),
            len(reply),
            elapsed_ms,
        )
        return reply
