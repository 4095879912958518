from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import UserDirectory

_COLUMNS = "user_id, email, name, is_manager, is_active"


class MySQLUserDirectory(UserDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_employee(row: dict) -> Employee:
        return Employee(
            user_id=int(row["user_id"]),
            email=row["email"],
            name=row.get("name") or "",
            is_manager=bool(row.get("is_manager", False)),
            is_active=bool(row.get("is_active", True)),
        )

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE is_active=1
                ORDER BY user_id ASC
                """
            )
            return [self._to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE user_id=%s AND is_active=1
                """,
                (user_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return self._to_employee(row)

    def list_by_ids(self, user_ids: Iterable[int]) -> Sequence[Employee]:
        ids = sorted({int(u) for u in user_ids})
        if not ids:
            return []

        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE user_id IN ({placeholders})
                ORDER BY user_id ASC
                """,
                tuple(ids),
            )
            return [self._to_employee(r) for r in fetchall(cur)]
