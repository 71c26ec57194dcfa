from __future__ import annotations

import logging
from collections.abc import Sequence

from command_hooks.core.common.exceptions import ArgumentParsingError
from command_hooks.core.domain.commands import ArgumentSpec, ParsedArguments
from command_hooks.core.interfaces.command_argument_parser_interface import (
    ICommandArgumentParser,
)
from command_hooks.core.services.tokenizer import tokenize

logger = logging.getLogger(__name__)

FLAG_MARKER = "-"
LONG_FLAG_MARKER = "--"


def is_flag(token: str) -> bool:
    return token.startswith(FLAG_MARKER)


def is_quoted(token: str) -> bool:
    """True if the token is fully wrapped in matching single or double quotes."""
    return len(token) >= 2 and token[0] == token[-1] and token[0] in ("'", '"')


def find_argument_spec(
    token: str, specs: Sequence[ArgumentSpec]
) -> ArgumentSpec | None:
    """Resolve a flag token against the argument specs.

    ``--name`` matches a spec key and ``-name`` matches an alias. When that
    fails, an exact key match is accepted for either form so that ``-name``
    still works for users who mix up the dash count.
    """
    is_long = token.startswith(LONG_FLAG_MARKER)
    name = token.lstrip(FLAG_MARKER)

    for spec in specs:
        if is_long and spec.key == name:
            return spec
        if not is_long and spec.alias is not None and spec.alias == name:
            return spec

    for spec in specs:
        if spec.key == name:
            return spec
    return None


class CommandArgumentParser(ICommandArgumentParser):
    """Resolve ``--key value`` / ``-alias value`` strings against an argument schema.

    - Only named flags are accepted; a bare token is an error
    - A flag followed by another flag falls back to its default value
    - Defaults are applied and required arguments enforced after the walk
    - Resolution is all-or-nothing: any failure raises, nothing partial is returned
    - A repeated flag overwrites the earlier value
    """

    def parse(
        self, args_str: str | None, specs: Sequence[ArgumentSpec]
    ) -> ParsedArguments:
        return self.resolve_tokens(tokenize(args_str), specs)

    def resolve_tokens(
        self, tokens: Sequence[str], specs: Sequence[ArgumentSpec]
    ) -> ParsedArguments:
        parsed: ParsedArguments = {}

        i = 0
        while i < len(tokens):
            token = tokens[i]
            if not is_flag(token):
                raise ArgumentParsingError(
                    f"Unexpected positional argument: {token}",
                    details={"token": token},
                )

            spec = find_argument_spec(token, specs)
            if spec is None:
                raise ArgumentParsingError(
                    f"Unknown argument: {token}", details={"token": token}
                )

            value = tokens[i + 1] if i + 1 < len(tokens) else None
            if value is not None and (not is_flag(value) or is_quoted(value)):
                parsed[spec.key] = value
                i += 2
                continue

            # No value follows: the flag stands alone and needs a default
            if not spec.has_default:
                raise ArgumentParsingError(
                    f"Argument {token} requires a value.",
                    details={"token": token, "argument": spec.key},
                )
            parsed[spec.key] = spec.default_value
            i += 1

        for spec in specs:
            if spec.key in parsed:
                continue
            if spec.has_default:
                parsed[spec.key] = spec.default_value
            elif spec.required:
                raise ArgumentParsingError(
                    f"Missing required argument: --{spec.key}",
                    details={"argument": spec.key},
                )

        logger.debug("Resolved %d argument(s): %s", len(parsed), sorted(parsed))
        return parsed
