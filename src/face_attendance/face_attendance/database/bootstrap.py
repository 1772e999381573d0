from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)


def as_db_config(db_config: dict) -> DBConfig:
    return DBConfig(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "face_attendance")),
    )


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def split_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ';' outside of quoted strings. Line comments are dropped."""

    buf: list[str] = []
    quote = None
    for line in sql.splitlines():
        if quote is None and line.strip().startswith("--"):
            continue
        for ch in line:
            if quote:
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
        buf.append("\n")

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = as_db_config(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Apply schema.sql (idempotent: CREATE ... IF NOT EXISTS)."""

    ensure_database_exists(db_config)
    sql = Path(schema_path).read_text(encoding="utf-8")
    # Keep the script portable regardless of the configured database name.
    sql = re.sub(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$", "", sql)

    conn = _connect(as_db_config(db_config))
    try:
        cur = conn.cursor()
        for stmt in split_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s", schema_path)


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(as_db_config(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
