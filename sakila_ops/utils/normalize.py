import re
from typing import Optional

INVALID_TABLE = "tabla_invalida"
INVALID_SQL_FILE = "archivo_invalido.sql"

_UNSAFE_CHARS = re.compile(r"[^a-z0-9_.\-]")
_WHITESPACE = re.compile(r"\s")
TABLE_NAME_RE = re.compile(r"[a-z0-9_]+")
SQL_FILENAME_RE = re.compile(r"[a-zA-Z0-9_.\-]+\.sql")


def normalize(raw: Optional[str]) -> str:
    """Trim, lowercase and replace anything outside [a-z0-9_.-] with '_'."""
    if raw is None:
        return ""
    return _UNSAFE_CHARS.sub("_", raw.strip().lower())


def _only_whitespace_rewritten(raw: Optional[str], normalized: str) -> bool:
    # "Users 1" -> "users_1" is a rename; "'; DROP" -> "___drop" is not.
    return _WHITESPACE.sub("_", (raw or "").strip().lower()) == normalized


def normalize_table_name(raw: Optional[str]) -> str:
    """Table names are interpolated into SQL text, so they must be
    whitelisted here; anything else maps to INVALID_TABLE, a name that
    simply will not be found."""
    normalized = normalize(raw)
    if not _only_whitespace_rewritten(raw, normalized):
        return INVALID_TABLE
    if not TABLE_NAME_RE.fullmatch(normalized):
        return INVALID_TABLE
    return normalized


def normalize_sql_filename(raw: Optional[str]) -> str:
    normalized = normalize(raw)
    if not _only_whitespace_rewritten(raw, normalized):
        return INVALID_SQL_FILE
    if not normalized.endswith(".sql"):
        normalized = normalized + ".sql"
    if not SQL_FILENAME_RE.fullmatch(normalized):
        return INVALID_SQL_FILE
    return normalized
