"""Export or import the portal's stored collections as a JSON snapshot.

The snapshot maps physical storage keys (``hafedpoly_students`` and so on)
to their raw JSON text, the same layout the browser portal kept in local
storage.

Usage:
    python -m portal.transfer_store export snapshot.json
    python -m portal.transfer_store import snapshot.json
"""
import argparse
import json
import sys

from portal.database import Base, SessionLocal, engine, ensure_record_schema
from portal.models.record import StoredRecord
from portal.store import RecordStore


def export_snapshot(store: RecordStore, path: str) -> int:
    snapshot = store.snapshot()
    with open(path, 'w', encoding='utf-8') as handle:
        json.dump(snapshot, handle, indent=2, ensure_ascii=False)
    return len(snapshot)


def import_snapshot(store: RecordStore, path: str) -> int:
    with open(path, encoding='utf-8') as handle:
        snapshot = json.load(handle)
    if not isinstance(snapshot, dict) or not all(isinstance(value, str) for value in snapshot.values()):
        raise ValueError('Snapshot must map storage keys to JSON text.')
    return len(store.restore(snapshot))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('action', choices=['export', 'import'])
    parser.add_argument('path')
    args = parser.parse_args(argv)

    Base.metadata.create_all(bind=engine, tables=[StoredRecord.__table__])
    ensure_record_schema()
    store = RecordStore(SessionLocal)

    if args.action == 'export':
        count = export_snapshot(store, args.path)
        print(f'Exported {count} keys to {args.path}')
        return

    try:
        count = import_snapshot(store, args.path)
    except ValueError as exc:
        print(f'Import failed: {exc}', file=sys.stderr)
        sys.exit(1)
    print(f'Imported {count} keys from {args.path}')


if __name__ == '__main__':
    main()
