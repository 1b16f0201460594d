import logging
from fastapi import APIRouter, Depends
from typing_extensions import Annotated

from ..core.errors import DatabaseError
from ..core.storage import SQLStore, get_store
from ..models.api import DashboardResponse, DashboardTotals, extract_scalar_total

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Dashboard"])

# panel name -> canned query file under SQL_DIR
PANELS = {
    "films_by_rating": "stat_films_by_rating.sql",
    "actors_by_initial": "stat_actors_by_initial.sql",
    "films_by_category": "stat_films_by_category.sql",
    "rentals_by_month": "stat_rentals_by_month.sql",
    "customers_by_country": "stat_customers_by_country.sql",
    "rentals_by_store": "stat_rentals_by_store.sql",
}

TOTALS = {
    "customers": "stat_customers.sql",
    "countries": "stat_countries.sql",
    "films": "stat_films.sql",
}


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(store: Annotated[SQLStore, Depends(get_store)]):
    resp = DashboardResponse()
    try:
        for name, filename in PANELS.items():
            resp.panels[name] = store.run_named_query(filename)
        resp.totals = DashboardTotals(
            **{
                name: extract_scalar_total(store.run_named_query(filename))
                for name, filename in TOTALS.items()
            }
        )
    except DatabaseError as exc:
        logger.error("dashboard query failed: %s", exc)
        resp.error = f"Database error: {exc}"
    except Exception as exc:
        logger.exception("loading the dashboard failed")
        resp.error = f"Unexpected error while loading the dashboard: {exc}"
    return resp
