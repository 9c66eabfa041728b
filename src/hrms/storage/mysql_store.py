from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StorageError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS kv_store (
    k VARCHAR(191) NOT NULL PRIMARY KEY,
    v LONGTEXT NOT NULL,
    version BIGINT NOT NULL DEFAULT 1,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
)
"""

# Deleted keys keep contributing to the revision sum.
TOMBSTONE_SQL = """
CREATE TABLE IF NOT EXISTS kv_store_meta (
    id TINYINT NOT NULL PRIMARY KEY,
    removed_versions BIGINT NOT NULL DEFAULT 0
)
"""


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise StorageError(f"Cannot connect to MySQL: {e}") from e
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise StorageError(f"MySQL store error: {e}") from e
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


class MySQLKeyValueStore:
    """KeyValueStore backed by a single `kv_store` table."""

    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    def ensure_schema(self) -> None:
        with db_cursor(self._conn) as (_, cur):
            cur.execute(SCHEMA_SQL)
            cur.execute(TOMBSTONE_SQL)
            cur.execute("INSERT IGNORE INTO kv_store_meta (id, removed_versions) VALUES (1, 0)")
        logger.info("kv_store schema ready on %s", self._conn.config.database)

    def get(self, key: str, default: Any = None) -> Any:
        with db_cursor(self._conn) as (_, cur):
            cur.execute("SELECT v FROM kv_store WHERE k = %s", (key,))
            row = fetchone(cur)
        if not row:
            return default
        try:
            return json.loads(row["v"])
        except ValueError as e:
            raise StorageError(f"Corrupt JSON under {key!r}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        try:
            raw = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot serialize value for {key!r}: {e}") from e

        with db_cursor(self._conn) as (_, cur):
            cur.execute(
                """
                INSERT INTO kv_store (k, v, version) VALUES (%s, %s, 1)
                ON DUPLICATE KEY UPDATE v = VALUES(v), version = version + 1
                """,
                (key, raw),
            )

    def remove(self, key: str) -> None:
        with db_cursor(self._conn) as (_, cur):
            cur.execute("SELECT version FROM kv_store WHERE k = %s", (key,))
            row = fetchone(cur)
            if not row:
                return
            cur.execute("DELETE FROM kv_store WHERE k = %s", (key,))
            cur.execute(
                "UPDATE kv_store_meta SET removed_versions = removed_versions + %s WHERE id = 1",
                (int(row["version"]) + 1,),
            )

    def keys(self) -> list[str]:
        with db_cursor(self._conn) as (_, cur):
            cur.execute("SELECT k FROM kv_store ORDER BY k")
            return [r["k"] for r in fetchall(cur)]

    def revision(self) -> int:
        with db_cursor(self._conn) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE((SELECT SUM(version) FROM kv_store), 0)
                     + COALESCE((SELECT removed_versions FROM kv_store_meta WHERE id = 1), 0) AS rev
                """
            )
            row = fetchone(cur)
        return int(row["rev"]) if row else 0
