"""Record store: named JSON values in the ``records`` table.

Each logical name maps to one physical key (``hafedpoly_students`` and so on)
holding the whole collection as JSON text, the same layout the portal has
always used, so an exported snapshot of older data loads unchanged.
"""

import json
import logging
from collections import defaultdict
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Iterable

from sqlalchemy.exc import SQLAlchemyError

from portal.core import config
from portal.core.exceptions import DeserializationFallback
from portal.models.record import StoredRecord

logger = logging.getLogger(__name__)

SESSION_KEY = 'users_current'
STUDENTS = 'students'
COMPLAINTS = 'complaints'
ANNOUNCEMENTS = 'announcements'

COLLECTIONS = (STUDENTS, COMPLAINTS, ANNOUNCEMENTS)

_PHYSICAL_SUFFIXES = {
    SESSION_KEY: 'user',
    STUDENTS: 'students',
    COMPLAINTS: 'complaints',
    ANNOUNCEMENTS: 'announcements',
}

Subscriber = Callable[[list[dict]], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _decode_records(key: str, raw: str) -> list[dict]:
    try:
        value = json.loads(raw)
    except ValueError as exc:
        raise DeserializationFallback(key, 'not valid JSON') from exc

    if not isinstance(value, list):
        raise DeserializationFallback(key, f'expected a list, got {type(value).__name__}')
    if not all(isinstance(item, dict) for item in value):
        raise DeserializationFallback(key, 'expected a list of objects')
    return value


def _encode(value: Any) -> str:
    return json.dumps(value, separators=(',', ':'), ensure_ascii=False)


class RecordStore:
    def __init__(self, session_factory, key_prefix: str | None = None):
        self._session_factory = session_factory
        self._key_prefix = config.STORAGE_KEY_PREFIX if key_prefix is None else key_prefix
        self._subscribers: dict[str, list[Subscriber]] = defaultdict(list)
        self._subscribers_lock = Lock()

    def storage_key(self, name: str) -> str:
        try:
            suffix = _PHYSICAL_SUFFIXES[name]
        except KeyError as exc:
            raise ValueError(f'Unknown collection: {name}') from exc
        return f'{self._key_prefix}{suffix}'

    def _get_row(self, key: str) -> tuple[str, datetime | None] | None:
        db = self._session_factory()
        try:
            record = db.get(StoredRecord, key)
            if record is None:
                return None
            return record.value, record.updated_at
        finally:
            db.close()

    def _set_raw(self, key: str, value: str) -> None:
        db = self._session_factory()
        try:
            record = db.get(StoredRecord, key)
            if record is None:
                db.add(StoredRecord(key=key, value=value, updated_at=_utcnow()))
            else:
                record.value = value
                record.updated_at = _utcnow()
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()

    def _delete_raw(self, key: str) -> None:
        db = self._session_factory()
        try:
            db.query(StoredRecord).filter(StoredRecord.key == key).delete()
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()

    def read(self, collection: str) -> list[dict]:
        """Return the stored records, or an empty list if absent or unreadable."""
        key = self.storage_key(collection)
        row = self._get_row(key)
        if row is None:
            return []

        try:
            return _decode_records(key, row[0])
        except DeserializationFallback as exc:
            logger.warning('%s Treating %s as empty.', exc.message, collection)
            return []

    def write(self, collection: str, records: Iterable[dict]) -> None:
        """Replace the whole collection, then notify its subscribers."""
        records = list(records)
        self._set_raw(self.storage_key(collection), _encode(records))
        self._publish(collection, records)

    def read_session(self) -> dict | None:
        key = self.storage_key(SESSION_KEY)
        row = self._get_row(key)
        if row is None:
            return None

        try:
            value = json.loads(row[0])
        except ValueError:
            logger.warning('Stored session under %r is not valid JSON. Ignoring it.', key)
            return None
        if not isinstance(value, dict):
            logger.warning('Stored session under %r is not an object. Ignoring it.', key)
            return None
        return value

    def write_session(self, user: dict) -> None:
        self._set_raw(self.storage_key(SESSION_KEY), _encode(user))

    def clear_session(self) -> None:
        self._delete_raw(self.storage_key(SESSION_KEY))

    def revision(self, collection: str) -> datetime | None:
        """When the collection was last written, by any process."""
        row = self._get_row(self.storage_key(collection))
        return row[1] if row else None

    def subscribe(self, collection: str, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback(records)`` after every write to ``collection``.

        Only writes made through this store instance are published; writes
        from other processes are picked up by polling.
        """
        self.storage_key(collection)
        with self._subscribers_lock:
            self._subscribers[collection].append(callback)

        def unsubscribe() -> None:
            with self._subscribers_lock:
                if callback in self._subscribers[collection]:
                    self._subscribers[collection].remove(callback)

        return unsubscribe

    def _publish(self, collection: str, records: list[dict]) -> None:
        with self._subscribers_lock:
            callbacks = list(self._subscribers[collection])
        for callback in callbacks:
            try:
                callback(records)
            except Exception:
                # The write is already committed; keep notifying the rest.
                logger.exception('Subscriber for %s failed.', collection)

    def snapshot(self) -> dict[str, str]:
        """Every stored key under this store's prefix, as raw JSON text."""
        db = self._session_factory()
        try:
            rows = (
                db.query(StoredRecord)
                .filter(StoredRecord.key.startswith(self._key_prefix))
                .order_by(StoredRecord.key)
                .all()
            )
            return {row.key: row.value for row in rows}
        finally:
            db.close()

    def restore(self, snapshot: dict[str, str]) -> list[str]:
        """Write raw key/value pairs back. Returns the keys that were written."""
        known = {self.storage_key(name): name for name in _PHYSICAL_SUFFIXES}
        written = []
        for key, value in snapshot.items():
            if key not in known:
                logger.warning('Skipping unknown storage key %r.', key)
                continue
            self._set_raw(key, value)
            written.append(key)
            name = known[key]
            if name in COLLECTIONS:
                self._publish(name, self.read(name))
        return written
