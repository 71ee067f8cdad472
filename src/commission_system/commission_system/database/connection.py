from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, ContextManager, Iterator, Optional, Protocol

import mysql.connector

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class TransactionManager(Protocol):
    """Runs a block of repository calls as one unit of work."""

    def atomic(self) -> ContextManager[Any]:
        raise NotImplementedError


class DatabaseConnection(TransactionManager):
    """DB connection factory, passed explicitly to every repository.

    Outside ``atomic()`` each repository call opens a short-lived connection.
    Inside ``atomic()`` the calls made on the same thread share one connection,
    committed (or rolled back) when the block exits.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._local = threading.local()

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )

    def active(self) -> Optional[Any]:
        return getattr(self._local, "conn", None)

    @contextmanager
    def atomic(self) -> Iterator[Any]:
        current = self.active()
        if current is not None:
            # Nested blocks join the outer transaction.
            yield current
            return

        conn = self.connect()
        self._local.conn = conn
        try:
            conn.start_transaction()
            yield conn
            conn.commit()
        except Exception:
            logger.warning("rolling back transaction", exc_info=True)
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            conn.close()
