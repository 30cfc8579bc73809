from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Mapping

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

_CREATE_DB_RE = re.compile(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$")
_USE_DB_RE = re.compile(r"(?im)^\s*USE\b.*?;\s*$")


def _split_statements(sql: str) -> Iterator[str]:
    # Split on ';' outside single/double quotes; '--' comment lines are dropped first.
    sql = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))
    buf: list[str] = []
    quote = None
    prev = ""
    for ch in sql:
        if quote:
            if ch == quote and prev != "\\":
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            prev = ch
            if stmt:
                yield stmt
            continue
        buf.append(ch)
        prev = ch

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: Mapping) -> None:
    factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    conn = factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    """Create the database if needed and run schema.sql against it (idempotent DDL)."""
    ensure_database_exists(db_config)

    sql = Path(schema_path).read_text(encoding="utf-8")
    sql = _USE_DB_RE.sub("", _CREATE_DB_RE.sub("", sql))

    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        count = 0
        for stmt in _split_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
        logger.info("Applied %d schema statements from %s", count, schema_path)
    finally:
        conn.close()


def list_tables(db_config: Mapping) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


DEMO_ADMIN = ("Demo Admin", "admin@staffhive.local", "admin123")
DEMO_EMPLOYEES = (
    ("Alice Nguyen", "alice@staffhive.local", "Engineering", "Backend Developer", 100000),
    ("Bao Tran", "bao@staffhive.local", "Sales", "Account Manager", 200000),
    ("Chi Le", "chi@staffhive.local", "Engineering", "Intern", 0),
)


def ensure_demo_data(db_config: Mapping) -> int:
    """Upsert a demo admin and its employees; returns the admin's user_id. Safe to re-run."""
    name, email, password = DEMO_ADMIN

    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
        row = cur.fetchone()
        if row:
            owner_id = int(row["user_id"])
            cur.execute(
                "UPDATE users SET password_hash=%s, role='admin', is_active=1 WHERE user_id=%s",
                (generate_password_hash(password), owner_id),
            )
        else:
            cur.execute(
                "INSERT INTO users(name, email, password_hash, role, is_active) VALUES(%s,%s,%s,'admin',1)",
                (name, email, generate_password_hash(password)),
            )
            owner_id = int(cur.lastrowid)

        for emp_name, emp_email, department, position, salary in DEMO_EMPLOYEES:
            cur.execute("SELECT employee_id FROM employees WHERE owner_id=%s AND email=%s", (owner_id, emp_email))
            if cur.fetchone():
                continue
            cur.execute(
                """
                INSERT INTO employees(owner_id, name, email, department, position, salary, status)
                VALUES(%s,%s,%s,%s,%s,%s,'active')
                """,
                (owner_id, emp_name, emp_email, department, position, salary),
            )

        conn.commit()
        logger.info("Demo data ready for %s (user_id=%d)", email, owner_id)
        return owner_id
    finally:
        conn.close()
