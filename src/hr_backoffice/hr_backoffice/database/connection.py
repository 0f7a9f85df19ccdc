from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import ContextManager, Iterator, Optional, Protocol

import mysql.connector

logger = logging.getLogger(__name__)


class UnitOfWork(Protocol):
    """Groups repository calls so they commit or roll back together."""

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: Outside a transaction every repository call opens a short-lived
    connection. Inside `transaction()` all calls on the same thread share one
    connection, committed once at the end.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._local = threading.local()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )

    @property
    def active(self):
        """Connection bound by an open `transaction()`, if any."""
        return getattr(self._local, "conn", None)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self.active is not None:
            # Nested: the outermost transaction owns commit/rollback.
            yield
            return

        conn = self.connect()
        self._local.conn = conn
        try:
            yield
            conn.commit()
        except Exception:
            logger.warning("Rolling back transaction")
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            conn.close()
