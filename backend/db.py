"""Database engine and sessions. SQLite for dev and tests; any SQLAlchemy URL in production."""
from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from utils.config import DATABASE_URL, TESTING

# Runtime safety: when TESTING=true, never use the real directory database.
if TESTING:
    url = DATABASE_URL
    if "locations.db" in url or (":memory:" not in url and "test" not in url.lower().split("?")[0]):
        raise RuntimeError(
            "Tests must not run against production. Set TESTING_DATABASE_URL to sqlite:///:memory: "
            "(or another test URL containing :memory: or 'test')."
        )

_is_sqlite = DATABASE_URL.startswith("sqlite")

_engine_kw: dict = {"echo": False}
if _is_sqlite:
    _engine_kw["connect_args"] = {"check_same_thread": False}
    # In-memory SQLite: one shared connection so every session sees the same DB.
    if ":memory:" in DATABASE_URL:
        _engine_kw["poolclass"] = StaticPool
else:
    _engine_kw["pool_pre_ping"] = True

_engine = create_engine(DATABASE_URL, **_engine_kw)


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


if _is_sqlite:

    @event.listens_for(_engine, "connect")
    def _sqlite_connect(dbapi_conn, connection_record):
        # SQLite's built-in lower() folds ASCII only; search lowercases terms in Python.
        dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)
        # Let SQLAlchemy emit BEGIN itself so SAVEPOINT nests inside a real transaction.
        dbapi_conn.isolation_level = None

    @event.listens_for(_engine, "begin")
    def _sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: yield a DB session and close after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for work outside a request (startup seeding). Rolls back on error."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
