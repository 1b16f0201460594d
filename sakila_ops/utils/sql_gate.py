import re
from typing import Iterable, List

from ..core.errors import ForbiddenStatementError

LINE_COMMENT = re.compile(r"^\s*--.*$", re.MULTILINE)
BLOCK_COMMENT = re.compile(r"/\*.*?\*/")

# Denylist only. CREATE, GRANT, vendor-specific destructive syntax and
# keywords hidden behind encodings all pass; closing that gap needs a real
# SQL parser.
FORBIDDEN = re.compile(
    r"\b(DROP|ALTER|DELETE|UPDATE|TRUNCATE|RENAME|MODIFY\s+COLUMN)\b",
    re.IGNORECASE,
)


def strip_comments(script: str) -> str:
    script = LINE_COMMENT.sub("", script or "")
    script = BLOCK_COMMENT.sub("", script)
    return script.strip()


def sanitize_and_split(script: str) -> List[str]:
    """Strip comments and split a script into its non-empty statements."""
    statements = []
    for candidate in strip_comments(script).split(";"):
        candidate = candidate.strip()
        if candidate:
            statements.append(candidate)
    return statements


def statement_is_forbidden(statement: str) -> bool:
    return FORBIDDEN.search(statement) is not None


def check_statements(statements: Iterable[str]) -> None:
    """Raise on the first forbidden statement (1-based index)."""
    for index, statement in enumerate(statements, start=1):
        if statement_is_forbidden(statement):
            raise ForbiddenStatementError(index, statement)
