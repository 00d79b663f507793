import logging
from contextlib import contextmanager

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    event,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from ..errors import StorageError, UrlAlreadyExists

logger = logging.getLogger(__name__)

metadata = MetaData()

urls = Table(
    "urls",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False, unique=True),
    Column("created_at", DateTime, nullable=False),
)

url_checks = Table(
    "url_checks",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("url_id", Integer, ForeignKey("urls.id"), nullable=False),
    Column("status_code", Integer, nullable=False),
    Column("title", Text, nullable=False, default=""),
    Column("h1", Text, nullable=False, default=""),
    Column("description", Text, nullable=False, default=""),
    Column("created_at", DateTime, nullable=False),
)


def _enable_sqlite_foreign_keys(dbapi_conn, _record):
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys = ON")
    cur.close()


def _is_unique_violation(error: IntegrityError) -> bool:
    if getattr(error.orig, "pgcode", None) == "23505":
        return True
    return "unique" in str(error.orig).lower()


def create_db_engine(url: str):
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # every checkout must see the same in-memory database
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(url, pool_pre_ping=True)


class Database:
    def __init__(self, url: str):
        self.engine = create_db_engine(url)

    @contextmanager
    def connect(self):
        try:
            with self.engine.begin() as conn:
                yield conn
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise UrlAlreadyExists(str(e.orig)) from e
            logger.exception("Integrity error")
            raise StorageError(str(e.orig)) from e
        except SQLAlchemyError as e:
            logger.exception("Database error")
            raise StorageError(str(e)) from e

    def init_schema(self):
        try:
            metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StorageError(f"cannot create schema: {e}") from e

    def dispose(self):
        self.engine.dispose()
