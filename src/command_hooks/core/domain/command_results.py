"""
Command Results Domain Model

Results handed back to the transport (chat replies) and the outcome of a
webhook dispatch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from command_hooks.core.domain.commands import CommandDefinition, ParsedArguments
from command_hooks.core.interfaces.model_bases import InternalDTO


@dataclass
class CommandResult:
    """
    Result of handling one chat message.

    ``message`` is the reply to send back to the user who wrote the message.
    """

    success: bool
    message: str
    name: str = ""
    data: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.data is None:
            self.data = {}


@dataclass(frozen=True)
class DispatchResult(InternalDTO):
    """HTTP outcome of a webhook call."""

    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def preview(self, max_chars: int) -> str:
        return self.body[:max_chars]


@dataclass(frozen=True)
class InvocationPlan(InternalDTO):
    """A matched command together with its fully resolved arguments."""

    command: CommandDefinition
    arguments: ParsedArguments = field(default_factory=dict)
