import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, model_validator

# Loosely-typed cell coming back from the driver.
CellValue = Union[None, bool, int, float, Decimal, str, datetime, date, time]

TableRow = Dict[str, CellValue]

_INTEGER = re.compile(r"[+-]?[0-9]+")


def to_cell(value: Any) -> CellValue:
    """Coerce a driver value into a CellValue."""
    if value is None or isinstance(
        value, (bool, int, float, Decimal, str, datetime, date, time)
    ):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    # timedelta (MySQL TIME), UUID, driver-specific types
    return str(value)


class QueryResult(BaseModel):
    """Either the query form (columns + rows) or the command form (message)."""

    columns: Optional[List[str]] = None
    rows: Optional[List[List[CellValue]]] = None
    message: Optional[str] = None

    @model_validator(mode="after")
    def _one_shape(self):
        is_query = self.columns is not None and self.rows is not None
        if is_query == (self.message is not None):
            raise ValueError("a result has either columns and rows or a message")
        if (self.columns is None) != (self.rows is None):
            raise ValueError("columns and rows go together")
        return self

    @property
    def is_query(self) -> bool:
        return self.message is None


def extract_scalar_total(result: Optional[QueryResult]) -> int:
    """First numeric value of the first row, e.g. the COUNT(*) of a canned
    query whatever its alias or position. 0 when nothing usable is found."""
    if result is None or not result.is_query or not result.rows:
        return 0
    for value in result.rows[0]:
        if isinstance(value, bool) or value is None:
            continue
        if isinstance(value, (int, float, Decimal)):
            try:
                return int(value)
            except (ValueError, OverflowError):
                continue
        if _INTEGER.fullmatch(str(value)):
            return int(str(value))
    return 0


class IndexedResult(QueryResult):
    index: int
    sql: str


class TableListResponse(BaseModel):
    tables: List[str] = []
    error: Optional[str] = None


class TablePageResponse(BaseModel):
    table: str
    page: int
    page_size: int
    total: int = 0
    rows: List[TableRow] = []
    error: Optional[str] = None


class ScriptResponse(BaseModel):
    filename: Optional[str] = None
    message: Optional[str] = None
    results: List[IndexedResult] = []
    error: Optional[str] = None


class DashboardTotals(BaseModel):
    customers: int = 0
    countries: int = 0
    films: int = 0


class DashboardResponse(BaseModel):
    panels: Dict[str, QueryResult] = {}
    totals: DashboardTotals = DashboardTotals()
    error: Optional[str] = None
