"""Keep user flags in one SQLite integer column and query them with fragments."""

from __future__ import annotations

import sqlite3
from typing import Any, Iterable, Optional

from packed_flags.bitfields import BitfieldSchema
from packed_flags.codec import Desired
from packed_flags.config import load_schema
from packed_flags.record import BitfieldRecord


USER_BITFIELDS: list[dict[str, Any]] = [
    {"column": "my_bits", "flags": {1: "seller", 2: "insane", 4: "sensible"}},
]


def build_schema() -> BitfieldSchema:
    return load_schema(USER_BITFIELDS)


def create_users(conn: sqlite3.Connection, rows: Iterable[tuple[str, int]]) -> None:
    # The packed column must never be NULL.
    conn.execute(
        "CREATE TABLE users (name TEXT PRIMARY KEY, my_bits INTEGER NOT NULL DEFAULT 0)"
    )
    conn.executemany("INSERT INTO users (name, my_bits) VALUES (?, ?)", list(rows))


def find_users(
    conn: sqlite3.Connection,
    schema: BitfieldSchema,
    desired: Desired,
    *,
    query_mode: Optional[str] = None,
) -> list[str]:
    where = schema.filter_sql(desired, query_mode=query_mode, table="users")
    cursor = conn.execute(f"SELECT name FROM users WHERE {where} ORDER BY name")
    return [name for (name,) in cursor.fetchall()]


def update_users(
    conn: sqlite3.Connection,
    schema: BitfieldSchema,
    desired: Desired,
    *,
    where: Optional[Desired] = None,
) -> int:
    """Flip flags for every matching row in one statement; returns the row count."""

    if not desired:
        return 0
    statement = f"UPDATE users SET {schema.update_sql(desired)}"
    if where:
        statement += f" WHERE {schema.filter_sql(where)}"
    return conn.execute(statement).rowcount


def load_record(conn: sqlite3.Connection, schema: BitfieldSchema, name: str) -> BitfieldRecord:
    row = conn.execute("SELECT my_bits FROM users WHERE name = ?", (name,)).fetchone()
    if row is None:
        raise LookupError(f"No user named {name!r}")
    return BitfieldRecord(schema, {"my_bits": row[0]})


def save_record(conn: sqlite3.Connection, name: str, record: BitfieldRecord) -> None:
    with conn:
        conn.execute(
            "UPDATE users SET my_bits = ? WHERE name = ?", (record.packed("my_bits"), name)
        )
    record.commit()
