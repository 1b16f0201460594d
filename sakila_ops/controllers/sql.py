import logging
from fastapi import APIRouter, Depends, File, UploadFile
from starlette.concurrency import run_in_threadpool
from typing_extensions import Annotated

from ..core.errors import DatabaseError, ForbiddenStatementError, ScriptStatementError
from ..core.storage import SQLStore, get_store
from ..models.api import ScriptResponse
from ..tools.sql_tool import run_script
from ..utils.normalize import normalize_sql_filename

logger = logging.getLogger(__name__)

router = APIRouter(tags=["SQL"])


@router.post("/ejecutar-sql", response_model=ScriptResponse)
async def execute_sql_file(
    store: Annotated[SQLStore, Depends(get_store)],
    archivo: UploadFile = File(...),
):
    content = await archivo.read()
    if not content:
        return ScriptResponse(error="Select a valid SQL file to upload.")

    resp = ScriptResponse(filename=normalize_sql_filename(archivo.filename))
    try:
        script = content.decode("utf-8")
    except UnicodeDecodeError:
        resp.error = "The uploaded file is not a UTF-8 SQL file."
        return resp

    try:
        resp.results = await run_in_threadpool(run_script, store, script)
        resp.message = "SQL file executed successfully."
    except ForbiddenStatementError as exc:
        resp.error = f"The file contains a forbidden instruction (statement #{exc.index}): {exc.statement}"
    except ScriptStatementError as exc:
        resp.error = f"Error in statement #{exc.index}: {exc.detail}"
    except DatabaseError as exc:
        resp.error = f"Database error: {exc}"
    except Exception as exc:
        logger.exception("running uploaded script %s failed", archivo.filename)
        resp.error = f"Unexpected error while processing the SQL file: {exc}"
    return resp
