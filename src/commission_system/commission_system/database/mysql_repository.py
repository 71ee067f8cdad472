from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from ..common.pagination import Page, PageRequest
from .connection import DatabaseConnection
from .mysql_base import build_update, db_cursor, fetchall, fetchone, where_clause

T = TypeVar("T")


class MySQLTableRepository:
    """Shared plumbing for single-table repositories keyed by ``id``.

    Subclasses set ``table``, ``updatable`` (columns accepted by ``update``)
    and ``countable`` (foreign-key columns dependents are counted by).
    """

    table: str = ""
    updatable: Sequence[str] = ()
    countable: Sequence[str] = ()

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists(self, row_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT 1 AS found FROM {self.table} WHERE id=%s", (int(row_id),))
            return fetchone(cur) is not None

    def count_by(self, column: str, value: int) -> int:
        if column not in self.countable:
            raise ValueError(f"{self.table} cannot be counted by {column}")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM {self.table} WHERE {column}=%s", (int(value),))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def update(self, row_id: int, changes: Dict[str, Any]) -> bool:
        if not changes:
            return self.exists(row_id)
        sql, params = build_update(self.table, "id", row_id, dict(changes), allowed=self.updatable)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            # MySQL reports 0 affected rows when values are unchanged.
            return cur.rowcount > 0 or self.exists(row_id)

    def delete_by_id(self, row_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {self.table} WHERE id=%s", (int(row_id),))
            return cur.rowcount > 0

    def _insert(self, columns: Sequence[str], values: Sequence[Any]) -> int:
        placeholders = ",".join(["%s"] * len(columns))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO {self.table}({', '.join(columns)}) VALUES({placeholders})",
                tuple(values),
            )
            return int(cur.lastrowid)

    def _fetch_one(self, select_sql: str, params: Sequence[Any], mapper: Callable[[dict], T]) -> Optional[T]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(select_sql, tuple(params))
            row = fetchone(cur)
            return mapper(row) if row else None

    def _page(
        self,
        *,
        select_sql: str,
        count_sql: str,
        conditions: List[str],
        params: List[Any],
        order_by: str,
        page: PageRequest,
        mapper: Callable[[dict], T],
    ) -> Page[T]:
        where = where_clause(conditions)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(count_sql + where, tuple(params))
            row = fetchone(cur)
            total = int(row["total"]) if row else 0

            cur.execute(
                f"{select_sql}{where} ORDER BY {order_by} LIMIT %s OFFSET %s",
                tuple(params) + (page.page_size, page.offset),
            )
            items = [mapper(r) for r in fetchall(cur)]
        return Page(items=items, total=total, page=page.page, page_size=page.page_size)
