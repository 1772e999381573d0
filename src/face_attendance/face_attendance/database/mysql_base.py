from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StoreUnavailableError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) on a fresh connection; commit on success.

    Driver errors surface as StoreUnavailableError with the cause chained.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("Database connection failed: %s", e)
        raise StoreUnavailableError("Database unavailable") from e

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
        raise StoreUnavailableError("Database operation failed") from e
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


def dump_embedding(value: Optional[tuple[float, ...]]) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(list(value))


def load_embedding(value: Any) -> Optional[tuple[float, ...]]:
    """Decode an embedding column (JSON text, bytes or already-decoded list)."""

    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value)
    return tuple(float(v) for v in value)
