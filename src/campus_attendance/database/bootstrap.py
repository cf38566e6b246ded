from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterator, Union

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

# schema.sql names its own database; the configured one wins
_DATABASE_DIRECTIVES = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")


def split_statements(sql: str) -> Iterator[str]:
    """Yield `;`-terminated statements, ignoring `--` comments and quoted `;`."""

    statement: list[str] = []
    quoted = False
    lines = _DATABASE_DIRECTIVES.sub("", sql).splitlines()

    for line in lines:
        if not quoted:
            stripped = line.lstrip()
            if stripped.startswith("--"):
                continue
        for ch in line:
            if ch == "'":
                quoted = not quoted
            if ch == ";" and not quoted:
                text = "".join(statement).strip()
                statement = []
                if text:
                    yield text
                continue
            statement.append(ch)
        statement.append("\n")

    text = "".join(statement).strip()
    if text:
        yield text


def _server(target: DBConfig, *, with_database: bool):
    # use_pure keeps multi-statement DDL off the C extension
    return closing(mysql.connector.connect(use_pure=True, **target.connect_kwargs(with_database=with_database)))


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with _server(target, with_database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: Union[str, Path]) -> None:
    """Create the database if needed and run every statement of the schema file.

    The schema only uses CREATE ... IF NOT EXISTS, so this is safe on every start.
    """

    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    statements = list(split_statements(Path(schema_path).read_text(encoding="utf-8")))
    with _server(target, with_database=True) as conn:
        cur = conn.cursor()
        for statement in statements:
            cur.execute(statement)
        conn.commit()
    logger.debug("applied %d schema statements to %s", len(statements), target.database)


def list_tables(db_config: dict) -> list[str]:
    with _server(DBConfig.from_dict(db_config), with_database=True) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
