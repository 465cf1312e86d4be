from __future__ import annotations

import json
from typing import Dict, List, Mapping

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import CollectionBackend


class MySQLBackend(CollectionBackend):
    """One row per collection in the `collections` table, payload as a JSON array."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load(self) -> Dict[str, List[dict]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT name, payload FROM collections")
            rows = fetchall(cur)
        return {r["name"]: json.loads(r["payload"]) for r in rows}

    def save(self, changes: Mapping[str, List[dict]]) -> None:
        # Single transaction: all collections or none.
        with db_cursor(self._conn_factory) as (_, cur):
            for name, rows in changes.items():
                cur.execute(
                    """
                    INSERT INTO collections(name, payload)
                    VALUES(%s, %s)
                    ON DUPLICATE KEY UPDATE payload=VALUES(payload)
                    """,
                    (name, json.dumps(list(rows))),
                )
