from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

import mysql.connector
import pytz
from mysql.connector import errorcode

from ..core.exceptions import DuplicateRecordError, IndexNotReadyError, UnavailableError
from .connection import DatabaseConnection

# Table missing (schema bootstrap still running) or blocked behind a DDL metadata lock.
INDEX_NOT_READY_ERRNOS = frozenset({errorcode.ER_NO_SUCH_TABLE, errorcode.ER_LOCK_WAIT_TIMEOUT})


@contextmanager
def translate_mysql_errors():
    """Map mysql-connector failures onto the store error taxonomy.

    Anything not recognized (e.g. programming errors in SQL) propagates unchanged.
    """
    try:
        yield
    except mysql.connector.Error as exc:
        if exc.errno in INDEX_NOT_READY_ERRNOS:
            raise IndexNotReadyError(str(exc)) from exc
        if exc.errno == errorcode.ER_DUP_ENTRY:
            raise DuplicateRecordError(str(exc)) from exc
        if isinstance(exc, (mysql.connector.errors.InterfaceError, mysql.connector.errors.OperationalError)):
            raise UnavailableError(str(exc)) from exc
        raise


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    with translate_mysql_errors():
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


def to_db_datetime(value: Optional[datetime], tz) -> Optional[datetime]:
    """DATETIME columns hold naive wall time in the reference timezone."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value
    return value.astimezone(tz).replace(tzinfo=None)


def from_db_datetime(value: Optional[datetime], tz) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is not None:
        return value.astimezone(tz)
    return tz.localize(value)


def resolve_tz(name: str):
    return pytz.timezone(name)
