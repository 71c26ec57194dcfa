"""
Parser for the free-text command registration grammar.

    <key words> --description[:] <text> --urlCall[:] <url>
        [--argKey[:] <k> --argKeyAlias[:] <a> --required[:] true
         --defaultValue[:] <v> --description[:] <d>] ...

The parser walks the text with a cursor instead of layering regular
expressions, so the flag/value boundaries can be tested in isolation.
"""

from __future__ import annotations

import logging
from typing import Any

from command_hooks.constants import BUILTIN_COMMAND_NAMESPACE, DEFAULT_COMMAND_PREFIX
from command_hooks.core.common.exceptions import RegistrationParseError
from command_hooks.core.domain.commands import (
    ArgumentSpec,
    CommandDefinition,
    build_argument_spec,
    build_command_definition,
)

logger = logging.getLogger(__name__)

FLAG_MARKER = "--"
BLOCK_OPEN = "["
BLOCK_CLOSE = "]"
NAME_VALUE_SEPARATORS = ":"
REGISTER_VERB = "register"

# Top-level flags are matched case-insensitively
TOP_LEVEL_FLAGS = {"description": "description", "urlcall": "urlCall"}
BLOCK_FLAGS = ("argKey", "argKeyAlias", "required", "defaultValue", "description")


def _is_flag_start(text: str, index: int, *, boundary_chars: str = "") -> bool:
    """True if a ``--`` marker starts at ``index`` on a token boundary."""
    if not text.startswith(FLAG_MARKER, index):
        return False
    if index == 0:
        return True
    previous = text[index - 1]
    return previous.isspace() or previous in boundary_chars


def _read_flag_name(text: str, index: int) -> tuple[str, int]:
    """Read a flag name starting at ``index``; stops at a colon, whitespace or ``[``."""
    end = index
    while (
        end < len(text)
        and not text[end].isspace()
        and text[end] not in NAME_VALUE_SEPARATORS
        and text[end] != BLOCK_OPEN
    ):
        end += 1
    return text[index:end], end


def _split_name_value(fragment: str) -> tuple[str, str]:
    """Split ``name: value`` / ``name value`` at the first colon-or-whitespace run."""
    name_end = 0
    while (
        name_end < len(fragment)
        and not fragment[name_end].isspace()
        and fragment[name_end] not in NAME_VALUE_SEPARATORS
    ):
        name_end += 1
    name = fragment[:name_end]
    value = fragment[name_end:].lstrip(NAME_VALUE_SEPARATORS + " \t\r\n").strip()
    if value.endswith(","):
        value = value[:-1].rstrip()
    return name, value


def strip_registration_prefix(
    text: str, command_prefix: str = DEFAULT_COMMAND_PREFIX
) -> str:
    """Drop a leading ``<prefix>command register`` or bare ``register``.

    Both forms show up when a chat message is pasted into a text form.
    """
    stripped = text.strip()
    for marker in (
        f"{command_prefix}{BUILTIN_COMMAND_NAMESPACE} {REGISTER_VERB} ",
        f"{REGISTER_VERB} ",
    ):
        if stripped.startswith(marker):
            return stripped[len(marker) :].strip()
    return stripped


class RegistrationTextParser:
    """Parse registration text into a CommandDefinition.

    Argument key/alias uniqueness is not checked here; the registration
    service and the store enforce it before anything is written.
    """

    def parse(self, text: str) -> CommandDefinition:
        """Parse a full registration string.

        Raises:
            RegistrationParseError: Missing key, missing urlCall or an
                unterminated argument block
            SchemaViolationError: An argument block or the URL is invalid
        """
        key, rest = self.split_key(text)
        top_level, blocks = self.scan(rest)

        url_call = top_level.get("urlCall")
        if not url_call:
            raise RegistrationParseError("Missing --urlCall", details={"command": key})

        args = [self.parse_block(block) for block in blocks]
        definition = build_command_definition(
            {
                "key": key,
                "description": top_level.get("description") or None,
                "urlCall": url_call,
                "args": args,
            }
        )
        logger.debug(
            "Parsed registration for %r with %d argument(s)", key, len(args)
        )
        return definition

    def split_key(self, text: str) -> tuple[str, str]:
        """Split the command key from the flags that follow it."""
        positions = [p for p in (text.find(FLAG_MARKER), text.find(BLOCK_OPEN)) if p != -1]
        if not positions:
            raise RegistrationParseError(
                "Missing description, urlCall or args definition."
            )
        start = min(positions)
        key = text[:start].strip()
        if not key:
            raise RegistrationParseError("Missing command key.")
        return key, text[start:]

    def scan(self, rest: str) -> tuple[dict[str, str], list[str]]:
        """Collect top-level flag values and the raw inner text of each ``[...]`` block.

        The first occurrence of a top-level flag wins; unknown top-level flags
        and stray text are ignored.
        """
        flags: dict[str, str] = {}
        blocks: list[str] = []

        i = 0
        while i < len(rest):
            if rest[i] == BLOCK_OPEN:
                close = rest.find(BLOCK_CLOSE, i + 1)
                if close == -1:
                    raise RegistrationParseError(
                        f"Unterminated argument block: {rest[i:].strip()}"
                    )
                blocks.append(rest[i + 1 : close])
                i = close + 1
                continue

            if _is_flag_start(rest, i, boundary_chars=BLOCK_CLOSE):
                name, name_end = _read_flag_name(rest, i + len(FLAG_MARKER))
                value_start = name_end
                if value_start < len(rest) and rest[value_start] in NAME_VALUE_SEPARATORS:
                    value_start += 1
                value_end = self._find_value_end(rest, value_start)
                value = rest[value_start:value_end].strip()

                canonical = TOP_LEVEL_FLAGS.get(name.lower())
                if canonical is None:
                    logger.debug("Ignoring unknown registration flag --%s", name)
                elif canonical not in flags:
                    flags[canonical] = value
                i = value_end
                continue

            i += 1
        return flags, blocks

    def _find_value_end(self, text: str, start: int) -> int:
        """A value runs to the next whitespace-preceded ``--``, the next ``[``, or the end."""
        k = start
        while k < len(text):
            if text[k] == BLOCK_OPEN:
                return k
            if k > 0 and _is_flag_start(text, k):
                return k
            k += 1
        return len(text)

    def split_fragments(self, inner: str) -> list[str]:
        """Split a block's inner text on every ``--`` marker.

        Text before the first marker is a fragment like any other, so
        ``[argKey: id --required: true]`` reads the same as the fully flagged
        form. Blank fragments are dropped.
        """
        return [fragment for fragment in inner.split(FLAG_MARKER) if fragment.strip()]

    def parse_block(self, inner: str) -> ArgumentSpec:
        """Parse the inner text of one ``[...]`` block into an ArgumentSpec."""
        fields: dict[str, Any] = {}
        for fragment in self.split_fragments(inner):
            name, value = _split_name_value(fragment)
            if name not in BLOCK_FLAGS:
                logger.debug("Ignoring unknown argument flag --%s", name)
                continue
            if name == "required":
                fields[name] = value == "true"
            else:
                fields[name] = value
        return build_argument_spec(fields)
