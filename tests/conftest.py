import pytest
from fastapi.testclient import TestClient

from sakila_ops.core.storage import SQLStore, get_store
from sakila_ops.main import app

SCHEMA = [
    "CREATE TABLE film (film_id INTEGER PRIMARY KEY, title TEXT, rating TEXT)",
    "CREATE TABLE customer (customer_id INTEGER PRIMARY KEY, first_name TEXT, last_name TEXT)",
    "CREATE TABLE country (country_id INTEGER PRIMARY KEY, country TEXT)",
    "CREATE TABLE actor (actor_id INTEGER PRIMARY KEY, first_name TEXT, last_name TEXT)",
    "CREATE TABLE items (id INTEGER PRIMARY KEY, label TEXT)",
    "INSERT INTO film VALUES (1, 'ACADEMY DINOSAUR', 'PG'), (2, 'ACE GOLDFINGER', 'G'), (3, 'ADAPTATION HOLES', 'G')",
    "INSERT INTO customer VALUES (1, 'MARY', 'SMITH'), (2, 'PATRICIA', 'JOHNSON')",
    "INSERT INTO country VALUES (1, 'Afghanistan'), (2, 'Algeria'), (3, 'Spain'), (4, 'Zambia')",
    "INSERT INTO actor VALUES (1, 'PENELOPE', 'GUINESS'), (2, 'NICK', 'WAHLBERG'), (3, 'ED', 'CHASE')",
]

# SQLite flavoured stand-ins for the packaged MySQL canned queries.
CANNED = {
    "stat_films_by_rating.sql": "SELECT rating, COUNT(*) AS total FROM film GROUP BY rating ORDER BY rating",
    "stat_actors_by_initial.sql": (
        "SELECT substr(last_name, 1, 1) AS initial, COUNT(*) AS total "
        "FROM actor GROUP BY initial ORDER BY initial"
    ),
    "stat_films_by_category.sql": "SELECT 'Action' AS category, COUNT(*) AS total FROM film",
    "stat_rentals_by_month.sql": "SELECT '2005-05' AS month, 0 AS total",
    "stat_customers_by_country.sql": "SELECT country, COUNT(*) AS total FROM country GROUP BY country",
    "stat_rentals_by_store.sql": "SELECT 'Store 1' AS store, 0 AS total",
    "stat_customers.sql": "SELECT COUNT(*) AS total_customers FROM customer",
    "stat_countries.sql": "SELECT COUNT(*) AS total_countries FROM country",
    "stat_films.sql": "SELECT 'films' AS label, COUNT(*) AS total_films FROM film",
}


@pytest.fixture
def sql_dir(tmp_path):
    path = tmp_path / "sql"
    path.mkdir()
    for name, sql in CANNED.items():
        (path / name).write_text(sql + "\n", encoding="utf-8")
    return path


@pytest.fixture
def store(tmp_path, sql_dir):
    store = SQLStore(f"sqlite:///{tmp_path / 'sakila.db'}", str(sql_dir))
    with store.session():
        for statement in SCHEMA:
            store.db.execute_sql(statement)
        store.db.execute_sql(
            "WITH RECURSIVE seq(n) AS (SELECT 1 UNION ALL SELECT n + 1 FROM seq WHERE n < 50) "
            "INSERT INTO items (id, label) SELECT n, 'item ' || n FROM seq"
        )
    yield store
    store.db.close()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
