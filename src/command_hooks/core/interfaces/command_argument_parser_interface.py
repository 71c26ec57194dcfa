from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from command_hooks.core.domain.commands import ArgumentSpec, ParsedArguments


class ICommandArgumentParser(Protocol):
    """Parses a command argument string against a command's argument schema.

    Implementations should be pure and side-effect free.
    """

    def parse(
        self, args_str: str | None, specs: Sequence[ArgumentSpec]
    ) -> ParsedArguments:
        """Parse an argument string into a dict of argument key to value.

        Args:
            args_str: Raw argument string (may be None or empty)
            specs: The command's argument specifications

        Returns:
            The resolved arguments, with defaults applied.

        Raises:
            ArgumentParsingError: If the string does not satisfy the schema
        """
        ...
