from __future__ import annotations

from typing import Protocol

from command_hooks.core.domain.command_results import DispatchResult
from command_hooks.core.domain.commands import ParsedArguments


class IWebhookDispatcher(Protocol):
    """Performs the webhook call for a resolved command."""

    async def invoke(self, url_call: str, args: ParsedArguments) -> DispatchResult:
        """POST the arguments as a JSON object to ``url_call``.

        Raises:
            DispatchError: If the webhook cannot be reached
        """
        ...
