import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

import peewee

from .database import MYSQL_TABLES, connect_database, connection_scope, derive_schema
from .errors import (
    EXECUTE,
    FETCH_PAGE,
    LIST_TABLES,
    DatabaseError,
    ErrorMessages,
    InvalidNameError,
    ResourceLoadError,
    count_rows_messages,
    translate_error,
)
from .settings import settings
from ..models.api import QueryResult, TableRow, to_cell
from ..utils.normalize import INVALID_TABLE, normalize_sql_filename, normalize_table_name

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Statement executed successfully."


class CannedQueryStore:
    """Server-side .sql files, looked up by normalized name."""

    def __init__(self, sql_dir: str):
        self.sql_dir = Path(sql_dir)

    def load(self, filename: str) -> str:
        path = self.sql_dir / normalize_sql_filename(filename)
        return path.read_text(encoding="utf-8").strip()


class SQLStore:
    def __init__(self, db_url: str, sql_dir: str, db: Optional[peewee.Database] = None):
        self.db_url = db_url
        self.db = db if db is not None else connect_database(db_url)
        self.canned = CannedQueryStore(sql_dir)

    def session(self):
        return connection_scope(self.db)

    def list_tables(self) -> List[str]:
        schema = derive_schema(self.db_url)
        with self.session():
            try:
                if isinstance(self.db, peewee.MySQLDatabase):
                    cursor = self.db.execute_sql(MYSQL_TABLES, (schema,))
                    return [name for name, in cursor.fetchall()]
                return self.db.get_tables()
            except peewee.PeeweeException as exc:
                raise translate_error(exc, LIST_TABLES) from exc

    def count_rows(self, table: str) -> int:
        name = normalize_table_name(table)
        with self.session():
            try:
                cursor = self.db.execute_sql(f"SELECT COUNT(*) AS total FROM {name}")
                row = cursor.fetchone()
            except peewee.PeeweeException as exc:
                raise self._table_error(exc, table, name, count_rows_messages(name)) from exc
        return int(row[0]) if row else 0

    def fetch_page(self, table: str, page: int, page_size: int) -> List[TableRow]:
        name = normalize_table_name(table)
        # identifiers cannot be bound; LIMIT/OFFSET can
        sql = f"SELECT * FROM {name} LIMIT {self.db.param} OFFSET {self.db.param}"
        logger.debug("page %d (size %d) of %s", page, page_size, name)
        with self.session():
            try:
                cursor = self.db.execute_sql(sql, (page_size, page * page_size))
                columns = [col[0] for col in cursor.description]
                return [dict(zip(columns, map(to_cell, row))) for row in cursor.fetchall()]
            except peewee.PeeweeException as exc:
                raise self._table_error(exc, table, name, FETCH_PAGE) from exc

    def execute(self, statement: str) -> QueryResult:
        """Run one statement. SELECTs return columns and rows, anything
        else returns the success message."""
        sql = statement.strip()
        logger.debug("executing %s", sql)
        with self.session():
            try:
                cursor = self.db.execute_sql(self._literal(sql))
                if not sql.upper().startswith("SELECT"):
                    return QueryResult(message=SUCCESS_MESSAGE)
                columns = [col[0] for col in cursor.description or ()]
                rows = [[to_cell(value) for value in row] for row in cursor.fetchall()]
            except peewee.PeeweeException as exc:
                raise translate_error(exc, EXECUTE) from exc
        return QueryResult(columns=columns, rows=rows)

    def run_named_query(self, filename: str) -> QueryResult:
        try:
            return self.execute(self.canned.load(filename))
        except (OSError, UnicodeDecodeError, DatabaseError) as exc:
            logger.error("canned query %s failed: %s", filename, exc)
            raise ResourceLoadError(
                "Could not load, read or execute the SQL file", str(exc)
            ) from exc

    def _literal(self, sql: str) -> str:
        # pymysql %-formats every statement, even without parameters
        if isinstance(self.db, peewee.MySQLDatabase):
            return sql.replace("%", "%%")
        return sql

    @staticmethod
    def _table_error(
        exc: Exception, table: str, name: str, messages: ErrorMessages
    ) -> DatabaseError:
        if name == INVALID_TABLE:
            return InvalidNameError(f"'{table}' is not a valid table name", str(exc))
        return translate_error(exc, messages)


@lru_cache
def get_store() -> SQLStore:
    return SQLStore(settings.DB_URL, settings.SQL_DIR)
