from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection per repository call.

    Yields ``(conn, cursor)``. The work commits when the block exits cleanly; any
    exception rolls it back and propagates so the repository can translate it.
    """
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
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def count(cur, sql: str, params: tuple = ()) -> int:
    cur.execute(sql, params)
    row = fetchone(cur)
    if not row:
        return 0
    return int(next(iter(row.values())) or 0)


def is_duplicate_key(error, key_name: str) -> bool:
    """True when an IntegrityError is a UNIQUE violation on ``key_name``.

    MySQL reports the key as ``'uq_x'`` or ``'table.uq_x'`` depending on version.
    """
    if getattr(error, "errno", None) != errorcode.ER_DUP_ENTRY:
        return False
    msg = str(getattr(error, "msg", "") or error)
    return f"'{key_name}'" in msg or f".{key_name}'" in msg


def is_missing_reference(error) -> bool:
    return getattr(error, "errno", None) == errorcode.ER_NO_REFERENCED_ROW_2
