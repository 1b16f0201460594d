"""Error taxonomy for database operations.

Every failure raised by the store, the SQL gate or the script runner is a
``DatabaseError``: a short user-facing ``message`` plus the original driver
text kept as ``detail``.
"""
from typing import NamedTuple, Optional

import peewee


class DatabaseError(Exception):
    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class StatementSyntaxError(DatabaseError):
    pass


class InsufficientPrivilegeError(DatabaseError):
    pass


class DatabaseConnectionError(DatabaseError):
    pass


class ExecutionError(DatabaseError):
    pass


class InvalidNameError(DatabaseError):
    pass


class ResourceLoadError(DatabaseError):
    pass


class ForbiddenStatementError(DatabaseError):
    def __init__(self, index: int, statement: str):
        super().__init__(
            f"Statement #{index} contains a forbidden instruction", statement
        )
        self.index = index
        self.statement = statement


class ScriptStatementError(DatabaseError):
    def __init__(self, index: int, statement: str, cause: Exception):
        super().__init__(f"Error in statement #{index}", str(cause))
        self.index = index
        self.statement = statement


class ErrorMessages(NamedTuple):
    syntax: str
    denied: str
    other: str


LIST_TABLES = ErrorMessages(
    "The schema or the tables do not exist",
    "You do not have permission to list the tables",
    "Could not list the tables",
)
FETCH_PAGE = ErrorMessages(
    "The table does not exist",
    "You do not have permission to read the table data",
    "Could not fetch the table data",
)
EXECUTE = ErrorMessages(
    "The SQL statement is not valid",
    "You do not have permission to run the statement",
    "Error running the statement",
)


def count_rows_messages(table: str) -> ErrorMessages:
    return ErrorMessages(
        f"Table '{table}' does not exist",
        "You do not have permission to read the table records",
        "Could not count the table rows",
    )


def _is_syntax_error(exc: Exception) -> bool:
    # MySQL/Postgres report syntax and unknown-object errors as
    # ProgrammingError; sqlite only says so in the message text.
    if isinstance(exc, peewee.ProgrammingError):
        return True
    text = str(exc).lower()
    return "syntax error" in text or "no such table" in text


def _is_permission_error(exc: Exception) -> bool:
    # heuristic: drivers phrase privilege failures as "... denied ..."
    return "denied" in str(exc).lower()


def translate_error(exc: Exception, messages: ErrorMessages = EXECUTE) -> DatabaseError:
    """Map a peewee/driver exception to the taxonomy above.

    The permission check runs first: MySQL reports "command denied" as a
    ProgrammingError, which would otherwise read as a syntax failure.
    """
    if isinstance(exc, DatabaseError):
        return exc
    detail = str(exc)
    if _is_permission_error(exc):
        return InsufficientPrivilegeError(messages.denied, detail)
    if _is_syntax_error(exc):
        return StatementSyntaxError(messages.syntax, detail)
    return ExecutionError(messages.other, detail)
