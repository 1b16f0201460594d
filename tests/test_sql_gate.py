import pytest

from sakila_ops.core.errors import ForbiddenStatementError
from sakila_ops.utils.sql_gate import (
    check_statements,
    sanitize_and_split,
    statement_is_forbidden,
    strip_comments,
)


def test_line_comments_are_removed():
    script = "-- comment\nSELECT 1; SELECT 2;"
    assert sanitize_and_split(script) == ["SELECT 1", "SELECT 2"]


def test_indented_line_comment_is_removed():
    assert strip_comments("SELECT 1;\n    -- trailing note\n") == "SELECT 1;"


def test_inline_block_comment_is_removed():
    assert sanitize_and_split("SELECT /* count */ 1 ;") == ["SELECT  1"]


def test_block_comment_spanning_lines_is_kept():
    script = "/* one\ntwo */ SELECT 1"
    assert sanitize_and_split(script) == [script]


def test_empty_statements_are_dropped():
    assert sanitize_and_split(";; \n ;SELECT 1;;") == ["SELECT 1"]
    assert sanitize_and_split("") == []
    assert sanitize_and_split("-- only a comment") == []


@pytest.mark.parametrize(
    "statement",
    [
        "DROP TABLE film",
        "drop table film",
        "Delete FROM rental WHERE rental_id = 1",
        "ALTER TABLE film ADD COLUMN x INT",
        "update film set title = 'x'",
        "TRUNCATE payment",
        "RENAME TABLE film TO movie",
        "SELECT 1 FROM dual WHERE 1 = 1 OR drop",
        "CHANGE film modify\n   column title TEXT",
    ],
)
def test_forbidden_statements(statement):
    assert statement_is_forbidden(statement)


@pytest.mark.parametrize(
    "statement",
    [
        "SELECT * FROM film",
        "SELECT last_update FROM film",
        "SELECT * FROM dropbox",
        "CREATE TABLE notes (id INT)",
        "INSERT INTO notes VALUES (1)",
        "SELECT updated FROM audit",
    ],
)
def test_allowed_statements(statement):
    assert not statement_is_forbidden(statement)


def test_check_statements_reports_first_forbidden_position():
    statements = ["SELECT 1", "SELECT 2", "Drop TABLE film", "DELETE FROM film"]
    with pytest.raises(ForbiddenStatementError) as info:
        check_statements(statements)
    assert info.value.index == 3
    assert info.value.statement == "Drop TABLE film"


def test_check_statements_accepts_clean_script():
    check_statements(sanitize_and_split("SELECT 1; INSERT INTO t VALUES (1);"))
