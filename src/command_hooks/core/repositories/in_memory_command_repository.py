from __future__ import annotations

import asyncio
import logging

from command_hooks.core.domain.commands import CommandDefinition
from command_hooks.core.interfaces.repositories_interface import ICommandRepository

logger = logging.getLogger(__name__)


class InMemoryCommandRepository(ICommandRepository):
    """In-memory implementation of the command repository.

    This repository keeps commands in memory and does not persist them.
    It is suitable for development and testing.
    """

    def __init__(self, commands: list[CommandDefinition] | None = None) -> None:
        self._commands: dict[str, CommandDefinition] = {}
        self._write_lock = asyncio.Lock()
        for command in commands or []:
            command.validate_argument_names()
            self._commands[command.key] = command

    async def list(self) -> list[CommandDefinition]:
        # Definitions are frozen, so a shallow copy is a consistent snapshot
        return list(self._commands.values())

    async def get(self, key: str) -> CommandDefinition | None:
        return self._commands.get(key)

    async def upsert(self, definition: CommandDefinition) -> CommandDefinition:
        definition.validate_argument_names()
        async with self._write_lock:
            replaced = definition.key in self._commands
            self._commands[definition.key] = definition
        logger.debug(
            "%s command %r", "Replaced" if replaced else "Added", definition.key
        )
        return definition

    async def delete(self, key: str) -> bool:
        async with self._write_lock:
            if key in self._commands:
                del self._commands[key]
                return True
        return False
