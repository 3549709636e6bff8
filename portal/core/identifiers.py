import secrets
import time
from datetime import datetime, timezone
from typing import Iterable


def new_record_id(prefix: str, existing_ids: Iterable[str] = ()) -> str:
    """Return ``<prefix>_<epoch ms>_<hex>`` that is not in ``existing_ids``."""
    taken = set(existing_ids)
    while True:
        candidate = f"{prefix}_{time.time_ns() // 1_000_000}_{secrets.token_hex(3)}"
        if candidate not in taken:
            return candidate


def utc_timestamp(now: datetime | None = None) -> str:
    # Same shape as JavaScript's Date.toISOString(): millisecond precision, "Z".
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
