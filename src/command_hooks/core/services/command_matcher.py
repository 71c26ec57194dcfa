from __future__ import annotations

import logging
from collections.abc import Iterable

from command_hooks.core.domain.commands import CommandDefinition, CommandMatch
from command_hooks.core.interfaces.repositories_interface import ICommandRepository

logger = logging.getLogger(__name__)

KEY_BOUNDARY = " "


class CommandMatcher:
    """Greedy longest-prefix matching of chat text against registered command keys."""

    def find_best_match(
        self, text: str, commands: Iterable[CommandDefinition]
    ) -> CommandMatch | None:
        """Return the longest command key that prefixes ``text`` on a word boundary.

        ``text`` must already have the chat command prefix removed. Longer keys
        are tried first so ``trigger deployment`` wins over ``trigger``; a key
        only matches when it is the whole text or is followed by a space.
        """
        candidates = sorted(commands, key=lambda command: len(command.key), reverse=True)
        for command in candidates:
            if not text.startswith(command.key):
                continue
            rest = text[len(command.key) :]
            if rest == "" or rest.startswith(KEY_BOUNDARY):
                return CommandMatch(command=command, args_string=rest.strip())
        return None

    async def match(
        self, text: str, repository: ICommandRepository
    ) -> CommandMatch | None:
        """Match against a fresh read of the repository.

        The command list is re-read on every call and never cached, so a
        registration or deletion is visible to the very next message.
        """
        commands = await repository.list()
        result = self.find_best_match(text, commands)
        if result is None:
            logger.debug("No command matched %r among %d command(s)", text, len(commands))
        return result
