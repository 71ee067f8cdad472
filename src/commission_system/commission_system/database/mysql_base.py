from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    shared = conn_factory.active()
    if shared is not None:
        # Commit/rollback belong to the enclosing atomic() block.
        cur = shared.cursor(dictionary=dictionary)
        try:
            yield shared, cur
        finally:
            cur.close()
        return

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: Iterable[int]) -> Tuple[str, List[int]]:
    """Build ``(%s,%s,...)`` for an IN filter; callers handle the empty case."""
    items = [int(v) for v in values]
    return "(" + ",".join(["%s"] * len(items)) + ")", items


def build_update(
    table: str,
    id_column: str,
    row_id: int,
    changes: Dict[str, Any],
    *,
    allowed: Sequence[str],
) -> Tuple[str, List[Any]]:
    """Build a partial UPDATE restricted to whitelisted columns."""
    unknown = set(changes) - set(allowed)
    if unknown:
        raise ValueError(f"Unsupported columns for {table}: {sorted(unknown)}")
    assignments = [f"{col}=%s" for col in changes]
    assignments.append("updated_at=CURRENT_TIMESTAMP")
    params = list(changes.values())
    params.append(int(row_id))
    return f"UPDATE {table} SET {', '.join(assignments)} WHERE {id_column}=%s", params


def where_clause(conditions: Sequence[str]) -> str:
    return (" WHERE " + " AND ".join(conditions)) if conditions else ""
