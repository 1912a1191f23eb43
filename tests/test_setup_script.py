import pytest

from app.database.engine import _normalize_url, create_setup_engine
from app.scripts import setup_database


def test_print_sql_does_not_need_a_database(capsys):
    assert setup_database.main(["--print-sql"]) == 0

    out = capsys.readouterr().out
    assert "CREATE TABLE IF NOT EXISTS public.profiles" in out
    assert 'DROP POLICY IF EXISTS "Users can update own profile"' in out


def test_apply_without_database_url_fails():
    assert setup_database.main([]) == 1


def test_missing_database_url_raises():
    with pytest.raises(ValueError):
        create_setup_engine()


@pytest.mark.parametrize("url, expected", [
    ("postgres://u:p@db:5432/postgres", "postgresql://u:p@db:5432/postgres"),
    ("postgresql+asyncpg://u:p@db:5432/postgres", "postgresql://u:p@db:5432/postgres"),
    ("postgresql://u:p@db:5432/postgres", "postgresql://u:p@db:5432/postgres"),
])
def test_normalize_url(url, expected):
    assert _normalize_url(url) == expected
