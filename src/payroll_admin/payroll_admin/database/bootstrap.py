from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from ..core.constants import ADMIN_ROLE_NAME, DEFAULT_PERMISSIONS, DEFAULT_ROLE_NAME, READ_USERS
from ..security.passwords import hash_password
from .connection import DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for the schema file (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
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


def _connect(config: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=config.host, port=config.port, user=config.user, password=config.password, use_pure=True)
    if with_database:
        kwargs["database"] = config.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(config: DBConfig) -> None:
    conn = _connect(config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(config: DBConfig, *, schema_path: str | Path) -> None:
    ensure_database_exists(config)
    sql = _strip_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))

    conn = _connect(config)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied to %s", config.database)


def list_tables(config: DBConfig) -> list[str]:
    conn = _connect(config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def seed_defaults(config: DBConfig, *, admin_email: str, admin_password: str) -> None:
    """Idempotently create the default permissions, the ADMIN and USER roles and one admin."""
    conn = _connect(config)
    try:
        cur = conn.cursor(dictionary=True)

        for name, description, module, action in DEFAULT_PERMISSIONS:
            cur.execute(
                """
                INSERT INTO permissions(name, description, module, action, is_active)
                VALUES(%s,%s,%s,%s,1)
                ON DUPLICATE KEY UPDATE description=VALUES(description)
                """,
                (name, description, module, action),
            )

        cur.execute("SELECT permission_id, name FROM permissions")
        ids_by_name = {r["name"]: int(r["permission_id"]) for r in cur.fetchall()}

        def upsert_role(name: str, description: str, permission_names: Iterable[str]) -> int:
            cur.execute("SELECT role_id FROM roles WHERE name=%s", (name,))
            row = cur.fetchone()
            if row:
                role_id = int(row["role_id"])
            else:
                cur.execute("INSERT INTO roles(name, description, is_active) VALUES(%s,%s,1)", (name, description))
                role_id = int(cur.lastrowid)
            for pname in permission_names:
                cur.execute(
                    "INSERT IGNORE INTO role_permissions(role_id, permission_id) VALUES(%s,%s)",
                    (role_id, ids_by_name[pname]),
                )
            return role_id

        admin_role_id = upsert_role(ADMIN_ROLE_NAME, "System administrator", [p[0] for p in DEFAULT_PERMISSIONS])
        upsert_role(DEFAULT_ROLE_NAME, "Basic system user", [READ_USERS])

        email = admin_email.strip().lower()
        cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
        if cur.fetchone():
            cur.execute("UPDATE users SET role_id=%s, is_active=1 WHERE email=%s", (admin_role_id, email))
        else:
            cur.execute(
                """
                INSERT INTO users(first_name, last_name, email, phone, password_hash, role_id, is_active, auth_provider)
                VALUES(%s,%s,%s,%s,%s,%s,1,'local')
                """,
                ("System", "Administrator", email, "+00 000 000 0000", hash_password(admin_password), admin_role_id),
            )

        conn.commit()
    finally:
        conn.close()
    logger.info("Default permissions, roles and admin %s ready", admin_email)
