"""
Command registration service.

Chat text, pasted web text and structured form payloads all end up in
``register``, which validates the whole definition before the repository is
touched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from command_hooks.constants import DEFAULT_COMMAND_PREFIX
from command_hooks.core.common.exceptions import SchemaViolationError
from command_hooks.core.domain.commands import (
    CommandDefinition,
    build_command_definition,
)
from command_hooks.core.interfaces.repositories_interface import ICommandRepository
from command_hooks.core.services.registration_parser import (
    RegistrationTextParser,
    strip_registration_prefix,
)

logger = logging.getLogger(__name__)


class CommandRegistrationService:
    """Validates and stores command definitions."""

    def __init__(
        self,
        repository: ICommandRepository,
        parser: RegistrationTextParser | None = None,
        command_prefix: str = DEFAULT_COMMAND_PREFIX,
    ) -> None:
        self.repository = repository
        self.parser = parser or RegistrationTextParser()
        self.command_prefix = command_prefix

    async def register(self, definition: CommandDefinition) -> CommandDefinition:
        """Validate and upsert a definition; nothing is written on failure."""
        definition.validate_argument_names()
        stored = await self.repository.upsert(definition)
        logger.info(
            "Registered command %r (%d argument(s))", stored.key, len(stored.args)
        )
        return stored

    async def register_from_text(self, text: str) -> CommandDefinition:
        """Register from the chat grammar.

        A leading ``<prefix>command register`` (as pasted from a chat
        message) is accepted and removed.
        """
        body = strip_registration_prefix(text, self.command_prefix)
        definition = self.parser.parse(body)
        return await self.register(definition)

    async def register_from_form(
        self, payload: Mapping[str, Any], old_key: str | None = None
    ) -> CommandDefinition:
        """Register from a structured form submission.

        When ``old_key`` names a different command (the key was edited), the
        old entry is removed only after the new definition passed validation.
        """
        if not isinstance(payload, Mapping):
            raise SchemaViolationError("Command payload must be an object")
        definition = build_command_definition(dict(payload))
        definition.validate_argument_names()

        stored = await self.register(definition)
        if old_key and old_key != stored.key:
            await self.repository.delete(old_key)
            logger.info("Renamed command %r to %r", old_key, stored.key)
        return stored

    async def delete(self, key: str) -> bool:
        deleted = await self.repository.delete(key.strip())
        if deleted:
            logger.info("Deleted command %r", key)
        else:
            logger.debug("Delete requested for unknown command %r", key)
        return deleted

    async def list_commands(self) -> list[CommandDefinition]:
        return await self.repository.list()
