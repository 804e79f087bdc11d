from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StorageError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)`` on a fresh connection; commit on success.

    Driver errors are rolled back and re-raised as :class:`StorageError`.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("database connection failed: %s", e)
        raise StorageError("Không kết nối được cơ sở dữ liệu") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("database statement failed: %s", e)
        raise StorageError("Lỗi truy vấn cơ sở dữ liệu") from e
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


def build_update(fields: Dict[str, Any]) -> tuple[str, list[Any]]:
    """Turn ``{"name": "x", "status": "Active"}`` into ``("name=%s, status=%s", [...])``.

    Column names come from code, never from request data.
    """

    assignments = ", ".join(f"{col}=%s" for col in fields)
    return assignments, list(fields.values())
