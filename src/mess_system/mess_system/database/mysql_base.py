from __future__ import annotations

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import InternalError
from .connection import DatabaseConnection, translate_error

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield `(conn, cursor)`.

    Joins the connection of an enclosing transaction when there is one (the
    transaction owns commit/rollback); otherwise opens, commits and closes a
    connection of its own.
    """
    active = conn_factory.active_connection()
    if active is not None:
        cur = active.cursor(dictionary=dictionary)
        try:
            yield active, cur
        finally:
            cur.close()
        return

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("Could not open database connection: %s", e)
        raise InternalError("Database unavailable") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("Database operation failed: %s", e)
        raise translate_error(e) from e
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


def as_int(value: Any) -> int:
    """MySQL SUM() comes back as Decimal or None."""
    if value is None:
        return 0
    return int(value)


def as_float(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, Decimal):
        return float(value)
    return float(value)
