from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from portal.core import config


def build_engine(url: str):
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


engine = build_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_record_schema_checked = False


def ensure_record_schema(bind=None) -> None:
    """Create the indexes ``create_all`` does not manage for ``records``."""
    global _record_schema_checked

    if _record_schema_checked and bind is None:
        return

    target = bind if bind is not None else engine

    with _schema_lock:
        if _record_schema_checked and bind is None:
            return

        inspector = inspect(target)

        if 'records' not in inspector.get_table_names():
            if bind is None:
                _record_schema_checked = True
            return

        with target.begin() as connection:
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_records_updated_at ON records(updated_at)')
            )

        if bind is None:
            _record_schema_checked = True
