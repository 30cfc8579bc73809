from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, Iterator, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.exceptions import DuplicateRecordError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, unique_key: Optional[str] = None) -> Iterator[Any]:
    """One connection per unit of work: commit on success, roll back on any error.

    A duplicate-key rejection surfaces as DuplicateRecordError tagged with `unique_key`.
    """

    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=True)
    try:
        yield cur
        conn.commit()
    except IntegrityError as e:
        conn.rollback()
        if is_duplicate_key(e):
            raise DuplicateRecordError(str(e), key=unique_key) from e
        raise
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def is_duplicate_key(exc: BaseException) -> bool:
    return isinstance(exc, IntegrityError) and exc.errno == errorcode.ER_DUP_ENTRY


def normalize_mysql_time(value: Any) -> Optional[time]:
    """TIME column -> minute-precision time (the connector hands back a timedelta or a string)."""
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        minutes = int(value.total_seconds()) // 60 % (24 * 60)
        return time(minutes // 60, minutes % 60)
    if isinstance(value, str):
        hours, minutes = value.strip().split(":")[:2]
        return time(int(hours), int(minutes))
    raise TypeError(f"Unsupported TIME value: {value!r}")
