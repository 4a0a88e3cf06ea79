# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates the first admin user.

Run once after the initial migration:
    python bin/seed_admin.py

The script reads FIRST_ADMIN_USERNAME and FIRST_ADMIN_PASSWORD from
etc/app.conf.  The account is created in group 0 with ``admin = true``
through the same entity rules as a ``user.set`` request, so the password is
hashed exactly like any other.
"""

import sys
import os

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
# bin/seed_admin.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from core.config import settings            # noqa: E402
from core.errors import ConflictError       # noqa: E402
from database import make_engine, make_session_factory  # noqa: E402
from users.schemas import UserPatch          # noqa: E402
from users.service import UserService       # noqa: E402
from users.store import scoped_store        # noqa: E402


def seed(session_factory) -> bool:
    """Create the admin account.  Returns False when there was nothing to do."""
    if not settings.first_admin_username or not settings.first_admin_password:
        print("[seed_admin] FIRST_ADMIN_USERNAME or FIRST_ADMIN_PASSWORD not set in etc/app.conf – nothing to do.")
        return False

    with scoped_store(session_factory)() as store:
        service = UserService(store)
        # search() treats group 0 as "any group"; the admin lives in group 0 only
        if store.find_many(username=settings.first_admin_username, group_id=0):
            print(f"[seed_admin] Admin '{settings.first_admin_username}' already exists – skipping.")
            return False

        patch = UserPatch(
            username=settings.first_admin_username,
            password=settings.first_admin_password,
            admin=True,
        )
        try:
            service.save(service.create(patch))
        except ConflictError:
            print(f"[seed_admin] Admin '{settings.first_admin_username}' was created concurrently – skipping.")
            return False

    print(f"[seed_admin] Admin '{settings.first_admin_username}' created successfully.")
    return True


if __name__ == "__main__":
    if not settings.database_url:
        sys.exit("[seed_admin] DATABASE_URL not set in etc/app.conf")
    engine = make_engine(settings.database_url)
    try:
        seed(make_session_factory(engine))
    finally:
        engine.dispose()
