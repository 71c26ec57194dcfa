"""
Chat-facing command service.

Turns one incoming chat message into a reply: built-in management commands
(``command register|delete|list``, ``help``) are handled here, anything else
is matched against the registered commands, its arguments resolved and the
webhook called.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from command_hooks.constants import (
    BUILTIN_COMMAND_NAMESPACE,
    BUILTIN_HELP,
    DEFAULT_COMMAND_PREFIX,
    DEFAULT_RESPONSE_PREVIEW_CHARS,
)
from command_hooks.core.common.exceptions import (
    CommandHooksError,
    CommandNotFoundError,
    DispatchError,
)
from command_hooks.core.domain.command_results import (
    CommandResult,
    DispatchResult,
    InvocationPlan,
)
from command_hooks.core.domain.commands import CommandDefinition
from command_hooks.core.interfaces.command_argument_parser_interface import (
    ICommandArgumentParser,
)
from command_hooks.core.interfaces.dispatcher_interface import IWebhookDispatcher
from command_hooks.core.interfaces.repositories_interface import ICommandRepository
from command_hooks.core.services.command_argument_parser import CommandArgumentParser
from command_hooks.core.services.command_matcher import CommandMatcher
from command_hooks.core.services.command_registration import (
    CommandRegistrationService,
)

logger = logging.getLogger(__name__)

Notifier = Callable[[str], Awaitable[None]]


class CommandService:
    """Handles chat messages addressed to the bot."""

    def __init__(
        self,
        repository: ICommandRepository,
        dispatcher: IWebhookDispatcher,
        registration: CommandRegistrationService | None = None,
        matcher: CommandMatcher | None = None,
        argument_parser: ICommandArgumentParser | None = None,
        command_prefix: str = DEFAULT_COMMAND_PREFIX,
        response_preview_chars: int = DEFAULT_RESPONSE_PREVIEW_CHARS,
    ) -> None:
        self.repository = repository
        self.dispatcher = dispatcher
        self.registration = registration or CommandRegistrationService(
            repository, command_prefix=command_prefix
        )
        self.matcher = matcher or CommandMatcher()
        self.argument_parser = argument_parser or CommandArgumentParser()
        self.command_prefix = command_prefix
        self.response_preview_chars = response_preview_chars

    async def resolve(self, text: str) -> InvocationPlan:
        """Match ``text`` (prefix already removed) and resolve its arguments.

        Raises:
            CommandNotFoundError: No registered command matches
            ArgumentParsingError: The arguments do not fit the command's schema
        """
        match = await self.matcher.match(text, self.repository)
        if match is None:
            raise CommandNotFoundError(details={"text": text})
        arguments = self.argument_parser.parse(match.args_string, match.command.args)
        return InvocationPlan(command=match.command, arguments=arguments)

    async def invoke(self, text: str) -> tuple[InvocationPlan, DispatchResult]:
        """Resolve ``text`` and call the matched command's webhook."""
        plan = await self.resolve(text)
        result = await self.dispatcher.invoke(plan.command.url_call, plan.arguments)
        return plan, result

    async def handle_message(
        self, text: str, notify: Notifier | None = None
    ) -> CommandResult | None:
        """Handle one chat message.

        Returns ``None`` for messages that do not start with the command
        prefix; otherwise the reply to send back. ``notify`` receives progress
        messages (sent before a webhook call) when given.
        """
        if not text or not text.startswith(self.command_prefix):
            return None

        content = text[len(self.command_prefix) :].strip()
        try:
            if content == BUILTIN_COMMAND_NAMESPACE or content.startswith(
                BUILTIN_COMMAND_NAMESPACE + " "
            ):
                return await self._handle_management(
                    content[len(BUILTIN_COMMAND_NAMESPACE) :].strip()
                )
            if content == BUILTIN_HELP:
                return CommandResult(True, self.help_text(), name=BUILTIN_HELP)
            return await self._handle_custom(content, notify)
        except CommandHooksError as e:
            logger.warning("Command failed for %r: %s", content, e.message)
            return CommandResult(False, f"⚠️ Error: {e.message}", data=e.to_dict())

    async def _handle_management(self, sub: str) -> CommandResult:
        if sub.startswith("register "):
            definition = await self.registration.register_from_text(
                sub[len("register ") :]
            )
            return CommandResult(
                True,
                f'✅ Command "{definition.key}" registered successfully!',
                name="register",
                data={"key": definition.key},
            )
        if sub.startswith("delete "):
            key = sub[len("delete ") :].strip()
            await self.registration.delete(key)
            return CommandResult(
                True, f'🗑️ Command "{key}" deleted.', name="delete", data={"key": key}
            )
        if sub == "list":
            commands = await self.registration.list_commands()
            return CommandResult(True, format_command_list(commands), name="list")
        return CommandResult(
            False,
            f"Usage: {self.command_prefix}{BUILTIN_COMMAND_NAMESPACE} <register|delete|list> ...",
            name=BUILTIN_COMMAND_NAMESPACE,
        )

    async def _handle_custom(
        self, content: str, notify: Notifier | None
    ) -> CommandResult:
        try:
            plan = await self.resolve(content)
        except CommandNotFoundError:
            return CommandResult(False, "❓ Unknown command.")

        key = plan.command.key
        if notify is not None:
            await notify(f'🔄 Executing "{key}"...')

        try:
            result = await self.dispatcher.invoke(plan.command.url_call, plan.arguments)
        except DispatchError as e:
            logger.warning("Webhook for %r failed: %s", key, e.message)
            return CommandResult(False, f"❌ Network Error: {e.message}", name=key)

        status_emoji = "✅" if result.ok else "❌"
        return CommandResult(
            result.ok,
            f"{status_emoji} Status: {result.status_code}\n"
            f"Response: {result.preview(self.response_preview_chars)}",
            name=key,
            data={"status_code": result.status_code, "arguments": plan.arguments},
        )

    def help_text(self) -> str:
        p = self.command_prefix
        return (
            "*Command Hooks*\n\n"
            "Usage:\n"
            f"{p}command list\n"
            f"{p}command register <key> --description <text> --urlCall <url> "
            "[--argKey <k> --argKeyAlias <a> --required true --defaultValue <v>]\n"
            f"{p}command delete <key>\n"
            f"{p}<key> --<argKey> <value> -<alias> <value>\n\n"
            "Custom commands supported."
        )


def format_command_list(commands: list[CommandDefinition]) -> str:
    """Render registered commands for a chat reply."""
    if not commands:
        return "📋 No commands registered."

    lines = ["📋 *Registered Commands:*", ""]
    for command in sorted(commands, key=lambda c: c.key):
        header = f"*{command.key}*"
        if command.description:
            header += f" - {command.description}"
        lines.append(header)
        if command.args:
            lines.append("  Args: " + ", ".join(arg.usage() for arg in command.args))
        lines.append("")
    return "\n".join(lines).rstrip("\n")
