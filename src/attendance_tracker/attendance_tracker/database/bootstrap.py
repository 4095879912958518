from __future__ import annotations

import re
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector

DEMO_EMPLOYEES = (
    ("manager@example.com", "Demo Manager", True),
    ("employee@example.com", "Demo Employee", False),
)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "attendance_tracker")),
    )


@contextmanager
def _admin_connection(db_config: dict, *, select_db: bool = True):
    """Short-lived connection for schema work; commits on success."""
    target = _as_target(db_config)
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if select_db:
        kwargs["database"] = target.database
    conn = mysql.connector.connect(**kwargs)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql must work whatever DB name the settings point at.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    return re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on top-level ';' (quoted semicolons and backslash escapes are kept)."""
    buf: list[str] = []
    quote = None
    escaped = False

    for ch in sql:
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    with _admin_connection(db_config) as conn:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    database = _as_target(db_config).database
    with _admin_connection(db_config, select_db=False) as conn:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_script(db_config, seed_path)


def ensure_demo_employees(db_config: dict) -> None:
    with _admin_connection(db_config) as conn:
        cur = conn.cursor(dictionary=True)
        for email, name, is_manager in DEMO_EMPLOYEES:
            cur.execute(
                """
                INSERT INTO employees (email, name, is_manager, is_active)
                VALUES (%s, %s, %s, 1)
                ON DUPLICATE KEY UPDATE name=VALUES(name), is_manager=VALUES(is_manager), is_active=1
                """,
                (email, name, int(is_manager)),
            )


def list_tables(db_config: dict) -> list[str]:
    with _admin_connection(db_config) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
