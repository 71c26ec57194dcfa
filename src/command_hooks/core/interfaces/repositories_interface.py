from __future__ import annotations

from abc import ABC, abstractmethod

from command_hooks.core.domain.commands import CommandDefinition


class ICommandRepository(ABC):
    """Durable key -> CommandDefinition store.

    ``list`` must return a fresh, consistent snapshot on every call; callers
    never cache it. ``upsert`` replaces by key atomically with respect to
    concurrent readers and rejects definitions whose argument keys or aliases
    collide.
    """

    @abstractmethod
    async def list(self) -> list[CommandDefinition]:
        pass

    @abstractmethod
    async def get(self, key: str) -> CommandDefinition | None:
        pass

    @abstractmethod
    async def upsert(self, definition: CommandDefinition) -> CommandDefinition:
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a command; an absent key is a no-op returning False."""
