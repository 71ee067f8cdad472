"""Schema/seed helpers used by ``create_app`` (AUTO_INIT_DB / AUTO_SEED_DB) and scripts/."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Mapping

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

# username -> (display name, password, is_admin, employee_scope)
DEMO_USERS = {
    "admin": ("Administrator", "admin123", True, "0"),
    "user1": ("Scoped User 1", "user123", False, "1,2"),
    "user2": ("Scoped User 2", "user123", False, "3,4,5"),
}

_CREATE_DB_RE = re.compile(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$")
_USE_DB_RE = re.compile(r"(?im)^\s*USE\b.*?;\s*$")


def _as_config(db_config: Mapping) -> DBConfig:
    return DBConfig(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "commission_db")),
    )


@contextmanager
def _session(config: DBConfig, *, select_db: bool = True) -> Iterator:
    kwargs = dict(host=config.host, port=config.port, user=config.user, password=config.password, use_pure=True)
    if select_db:
        kwargs["database"] = config.database
    conn = mysql.connector.connect(**kwargs)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def split_statements(sql: str) -> List[str]:
    """Split a SQL script on ``;`` outside quoted strings, skipping ``--`` comment lines."""
    sql = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))
    statements: List[str] = []
    start = 0
    quote = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            statements.append(sql[start:i])
            start = i + 1
        i += 1
    statements.append(sql[start:])
    return [s.strip() for s in statements if s.strip()]


def _run_script(db_config: Mapping, path: str | Path) -> int:
    # The target database comes from settings, not from the script.
    sql = Path(path).read_text(encoding="utf-8")
    sql = _USE_DB_RE.sub("", _CREATE_DB_RE.sub("", sql))
    statements = split_statements(sql)
    with _session(_as_config(db_config)) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
    return len(statements)


def ensure_database_exists(db_config: Mapping) -> None:
    config = _as_config(db_config)
    with _session(config, select_db=False) as conn:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("applied %d schema statement(s) from %s", count, schema_path)


def apply_seed_sql(db_config: Mapping, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    logger.info("applied %d seed statement(s) from %s", count, seed_path)


def ensure_demo_users(db_config: Mapping) -> None:
    """Upsert the demo accounts with real password hashes."""
    with _session(_as_config(db_config)) as conn:
        cur = conn.cursor()
        for username, (name, password, is_admin, scope) in DEMO_USERS.items():
            cur.execute(
                "INSERT INTO users (username, name, password_hash, is_admin, employee_scope, status) "
                "VALUES (%s, %s, %s, %s, %s, 1) "
                "ON DUPLICATE KEY UPDATE name=VALUES(name), password_hash=VALUES(password_hash), "
                "is_admin=VALUES(is_admin), employee_scope=VALUES(employee_scope), status=1",
                (username, name, generate_password_hash(password), 1 if is_admin else 0, scope),
            )
    logger.info("demo users ready: %s", ", ".join(DEMO_USERS))


def list_tables(db_config: Mapping) -> List[str]:
    with _session(_as_config(db_config)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
