"""
Wiring of the command service from configuration.
"""

from __future__ import annotations

import logging

from command_hooks.constants import StorageBackend
from command_hooks.core.config.app_config import AppConfig
from command_hooks.core.interfaces.dispatcher_interface import IWebhookDispatcher
from command_hooks.core.interfaces.repositories_interface import ICommandRepository
from command_hooks.core.repositories.in_memory_command_repository import (
    InMemoryCommandRepository,
)
from command_hooks.core.repositories.sqlite_command_repository import (
    SqliteCommandRepository,
)
from command_hooks.core.services.command_registration import (
    CommandRegistrationService,
)
from command_hooks.core.services.command_service import CommandService
from command_hooks.core.services.webhook_dispatcher import HttpxWebhookDispatcher

logger = logging.getLogger(__name__)


def build_repository(config: AppConfig) -> ICommandRepository:
    """Create the command store selected by ``config.storage.backend``."""
    if config.storage.backend == StorageBackend.MEMORY:
        logger.info("Using in-memory command store (commands are not persisted)")
        return InMemoryCommandRepository()
    logger.info("Using SQLite command store at %s", config.storage.database_url)
    return SqliteCommandRepository(config.storage.database_url)


def build_command_service(
    config: AppConfig,
    *,
    repository: ICommandRepository | None = None,
    dispatcher: IWebhookDispatcher | None = None,
) -> CommandService:
    """Build a fully wired CommandService; collaborators may be injected."""
    repo = repository or build_repository(config)
    registration = CommandRegistrationService(
        repo, command_prefix=config.command_prefix
    )
    return CommandService(
        repository=repo,
        dispatcher=dispatcher
        or HttpxWebhookDispatcher(timeout=config.dispatch.timeout),
        registration=registration,
        command_prefix=config.command_prefix,
        response_preview_chars=config.dispatch.response_preview_chars,
    )
