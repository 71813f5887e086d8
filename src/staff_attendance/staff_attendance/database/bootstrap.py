from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Iterable, Mapping

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

DEMO_WORKING_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a schema file on ``;``, ignoring semicolons inside quotes and ``--`` comments."""
    buf: list[str] = []
    in_single = False
    in_double = False
    in_comment = False
    escape = False

    for i, ch in enumerate(sql):
        if in_comment:
            if ch == "\n":
                in_comment = False
                buf.append(ch)
            continue

        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "-" and not in_single and not in_double and sql[i : i + 2] == "--":
            in_comment = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: Mapping) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_demo_users(db_config: Mapping) -> None:
    """Create (or reset) the demo admin and staff accounts."""
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_user(email: str, password: str, role: Role) -> int:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE users SET password_hash=%s, role=%s, is_active=1 WHERE user_id=%s",
                    (password_hash, role.value, existing["user_id"]),
                )
                return int(existing["user_id"])
            cur.execute(
                "INSERT INTO users (email, password_hash, role) VALUES (%s, %s, %s)",
                (email, password_hash, role.value),
            )
            return int(cur.lastrowid)

        upsert_user("admin@example.com", "admin123", Role.ADMIN)
        staff_id = upsert_user("staff@example.com", "staff123", Role.STAFF)

        cur.execute(
            """
            INSERT INTO staff_profiles (user_id, full_name, salary, working_days, office_time_in, office_time_out)
            VALUES (%s, %s, %s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE full_name=VALUES(full_name)
            """,
            (staff_id, "John Doe", 50000, json.dumps(DEMO_WORKING_DAYS), "09:00", "18:00"),
        )

        conn.commit()
        logger.info("demo users: admin@example.com / admin123, staff@example.com / staff123")
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
