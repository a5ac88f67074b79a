from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConcurrencyError, InternalError

logger = logging.getLogger(__name__)

# Errors after which InnoDB has rolled the transaction back and the work may be re-run.
RETRYABLE_ERRNOS = frozenset({errorcode.ER_LOCK_DEADLOCK, errorcode.ER_LOCK_WAIT_TIMEOUT})


def translate_error(e: mysql.connector.Error) -> InternalError:
    if getattr(e, "errno", None) in RETRYABLE_ERRNOS:
        return ConcurrencyError(f"Transaction aborted by lock conflict (errno {e.errno})")
    return InternalError("Database operation failed")


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: Outside of `transaction()` every repository call opens a short-lived
    connection. Inside it, all calls made on the same thread share one
    connection and commit together.
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
            autocommit=False,
        )

    def active_connection(self):
        """Connection bound by an enclosing `transaction()` on this thread, if any."""
        return getattr(self._local, "conn", None)

    @contextmanager
    def transaction(self) -> Iterator[object]:
        """Run the enclosed repository calls as one all-or-nothing unit of work.

        Nested calls join the outer transaction.
        """
        active = self.active_connection()
        if active is not None:
            yield active
            return

        try:
            conn = self.connect()
        except mysql.connector.Error as e:
            logger.error("Could not open database connection: %s", e)
            raise InternalError("Database unavailable") from e

        self._local.conn = conn
        try:
            yield conn
            conn.commit()
        except mysql.connector.Error as e:
            conn.rollback()
            logger.error("Transaction rolled back: %s", e)
            raise translate_error(e) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            conn.close()
