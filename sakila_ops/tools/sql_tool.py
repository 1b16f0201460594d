import logging
from typing import List

from ..core.errors import DatabaseError, ForbiddenStatementError, ScriptStatementError
from ..core.storage import SQLStore
from ..models.api import IndexedResult
from ..utils.sql_gate import check_statements, sanitize_and_split

logger = logging.getLogger(__name__)


def _safe(script: str) -> List[str]:
    statements = sanitize_and_split(script)
    try:
        check_statements(statements)
    except ForbiddenStatementError as exc:
        logger.warning("rejected script at statement #%d: %s", exc.index, exc.statement)
        raise
    return statements


def run_script(store: SQLStore, script: str) -> List[IndexedResult]:
    """Check every statement of an uploaded script, then run them in order.

    Nothing runs if any statement is forbidden. A failing statement stops the
    script; the ones before it stay applied.
    """
    statements = _safe(script)
    results = []
    with store.session():
        for index, statement in enumerate(statements, start=1):
            try:
                result = store.execute(statement)
            except DatabaseError as exc:
                raise ScriptStatementError(index, statement, exc) from exc
            if result.is_query:
                results.append(
                    IndexedResult(index=index, sql=statement, **result.model_dump())
                )
    return results
