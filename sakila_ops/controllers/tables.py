import logging
from fastapi import APIRouter, Depends, Query
from typing_extensions import Annotated

from ..core.errors import DatabaseError
from ..core.settings import settings
from ..core.storage import SQLStore, get_store
from ..models.api import TableListResponse, TablePageResponse
from ..utils.normalize import normalize_table_name

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Tables"])


@router.get("/tablas", response_model=TableListResponse)
def list_tables(store: Annotated[SQLStore, Depends(get_store)]):
    try:
        return TableListResponse(tables=store.list_tables())
    except DatabaseError as exc:
        return TableListResponse(error=f"Database error: {exc}")
    except Exception as exc:
        logger.exception("listing tables failed")
        return TableListResponse(error=f"Unexpected error while listing the tables: {exc}")


@router.get("/tabla/{name}", response_model=TablePageResponse)
def show_table(
    name: str,
    store: Annotated[SQLStore, Depends(get_store)],
    pagina: int = Query(0, ge=0),
    tamanio: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1),
):
    resp = TablePageResponse(
        table=normalize_table_name(name), page=pagina, page_size=tamanio
    )
    try:
        resp.rows = store.fetch_page(name, pagina, tamanio)
        resp.total = store.count_rows(name)
    except DatabaseError as exc:
        resp.error = f"Could not reach the database or the table does not exist: {exc}"
    except Exception as exc:
        logger.exception("showing table %s failed", name)
        resp.error = f"Unexpected error while showing the table: {exc}"
    return resp
