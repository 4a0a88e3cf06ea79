# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Start the NATS worker that answers user.get / user.del / user.set / user.find.

    python bin/run_worker.py

Connection settings come from etc/app.conf (see etc/app.conf.example).
"""

import asyncio
import sys
import os

# bin/run_worker.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from core.config import settings          # noqa: E402
from transport.nats_worker import serve   # noqa: E402


if __name__ == "__main__":
    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        pass
