import logging
from contextlib import contextmanager

import peewee
from playhouse.db_url import connect

from .errors import DatabaseConnectionError, DatabaseError

logger = logging.getLogger(__name__)

MYSQL_TABLES = (
    "SELECT table_name FROM information_schema.tables "
    "WHERE table_schema = %s AND table_type = 'BASE TABLE' "
    "ORDER BY table_name"
)


def connect_database(db_url: str) -> peewee.Database:
    """Build a peewee database from a URL without opening a connection."""
    return connect(db_url)


def derive_schema(db_url: str) -> str:
    """Return the schema named by the last path segment of a connection URL.

    ``mysql://user@host:3306/sakila?charset=utf8mb4`` -> ``sakila``
    """
    segments = [part for part in (db_url or "").split("/") if part]
    if not segments:
        raise DatabaseError("Invalid database URL", db_url)
    return segments[-1].split("?")[0]


@contextmanager
def connection_scope(db: peewee.Database):
    """Hold one connection for the duration of the block.

    Only the scope that opened the connection closes it, so scopes nest.
    """
    opened = db.is_closed()
    if opened:
        try:
            db.connect()
        except (peewee.PeeweeException, OSError) as exc:
            logger.error("could not connect to %s: %s", db.database, exc)
            raise DatabaseConnectionError(
                "Could not connect to the database", str(exc)
            ) from exc
    try:
        yield db
    finally:
        if opened and not db.is_closed():
            db.close()
