from __future__ import annotations

from pathlib import Path

from src.commission_system.commission_system.database.bootstrap import split_statements

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_split_keeps_semicolons_inside_quotes():
    sql = "-- comment; ignored\nINSERT INTO t VALUES ('a;b');\nINSERT INTO t VALUES ('it\\'s');\n"
    assert split_statements(sql) == ["INSERT INTO t VALUES ('a;b')", "INSERT INTO t VALUES ('it\\'s')"]


def test_schema_defines_every_table():
    statements = split_statements((REPO_ROOT / "database" / "schema.sql").read_text(encoding="utf-8"))
    created = [s.split()[5] for s in statements if s.upper().startswith("CREATE TABLE")]
    assert created == [
        "users",
        "companies",
        "departments",
        "positions",
        "employees",
        "project_permissions",
        "commission_projects",
        "daily_monthly_reports",
    ]
