"""SQLite-backed command repository."""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any

from command_hooks.core.common.exceptions import ConfigurationError, StorageError
from command_hooks.core.domain.commands import (
    CommandDefinition,
    build_command_definition,
)
from command_hooks.core.interfaces.repositories_interface import ICommandRepository

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"
SQLITE_URL_SCHEME = "sqlite:///"


def resolve_database_path(database_url: str) -> str:
    """Accept a plain file path, ``sqlite:///path`` or ``:memory:``."""
    if database_url.startswith(SQLITE_URL_SCHEME):
        database_url = database_url[len(SQLITE_URL_SCHEME) :]
    if not database_url:
        raise ConfigurationError("Database URL must not be empty")
    return database_url


class SqliteCommandRepository(ICommandRepository):
    """Stores one row per command; ``args`` holds the argument list as JSON."""

    def __init__(self, database_url: str) -> None:
        self.db_path = resolve_database_path(database_url)
        if self.db_path != MEMORY_DATABASE:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self) -> None:
        with self._lock, self.conn:
            self.conn.execute(
                """
                CREATE TABLE IF NOT EXISTS commands (
                    key TEXT PRIMARY KEY,
                    description TEXT,
                    urlCall TEXT NOT NULL,
                    args TEXT
                )
                """
            )

    def _row_to_definition(self, row: sqlite3.Row) -> CommandDefinition:
        try:
            args: Any = json.loads(row["args"]) if row["args"] else []
        except json.JSONDecodeError as e:
            logger.error(
                "Stored arguments of command %r are not valid JSON: %s",
                row["key"],
                e,
                exc_info=True,
            )
            raise StorageError(
                f"Stored arguments of command {row['key']!r} are corrupt",
                details={"command": row["key"]},
            ) from e
        return build_command_definition(
            {
                "key": row["key"],
                "description": row["description"],
                "urlCall": row["urlCall"],
                "args": args,
            }
        )

    async def list(self) -> list[CommandDefinition]:
        with self._lock:
            rows = self.conn.execute(
                "SELECT key, description, urlCall, args FROM commands"
            ).fetchall()
        return [self._row_to_definition(row) for row in rows]

    async def get(self, key: str) -> CommandDefinition | None:
        with self._lock:
            row = self.conn.execute(
                "SELECT key, description, urlCall, args FROM commands WHERE key = ?",
                (key,),
            ).fetchone()
        return self._row_to_definition(row) if row else None

    async def upsert(self, definition: CommandDefinition) -> CommandDefinition:
        definition.validate_argument_names()
        wire = definition.to_wire()
        with self._lock, self.conn:
            self.conn.execute(
                """
                INSERT OR REPLACE INTO commands (key, description, urlCall, args)
                VALUES (:key, :description, :urlCall, :args)
                """,
                {
                    "key": wire["key"],
                    "description": wire["description"],
                    "urlCall": wire["urlCall"],
                    "args": json.dumps(wire["args"]),
                },
            )
        logger.debug("Stored command %r", definition.key)
        return definition

    async def delete(self, key: str) -> bool:
        with self._lock, self.conn:
            cursor = self.conn.execute("DELETE FROM commands WHERE key = ?", (key,))
        return cursor.rowcount > 0

    def close(self) -> None:
        with self._lock:
            self.conn.close()
