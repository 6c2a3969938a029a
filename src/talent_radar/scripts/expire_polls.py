"""Run the poll expiry sweep once, e.g. from cron when the in-app worker is disabled."""
from __future__ import annotations

import sys

from talent_radar.core.exceptions import StorageError
from talent_radar.core.logging import configure_logging
from talent_radar.db.session import SessionLocal
from talent_radar.services.polls import expire_polls


def main() -> int:
    configure_logging()
    with SessionLocal() as db:
        try:
            expired = expire_polls(db)
        except StorageError as exc:
            print(f"[expire-polls][FAIL] {exc.message}", file=sys.stderr)
            return 1
    print(f"[expire-polls] Closed {expired} expired poll(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
