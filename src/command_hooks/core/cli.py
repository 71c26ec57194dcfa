"""
Command-line entry point.

Feeds chat messages to the command service and prints the replies. Messages
come from the positional arguments or, when none are given, one per line
from standard input. Useful for trying out commands without a chat transport.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Iterable, Sequence
from typing import Any, TextIO

from command_hooks.command_prefix import validate_command_prefix
from command_hooks.constants import StorageBackend
from command_hooks.core.app.application_factory import build_command_service
from command_hooks.core.common.exceptions import ConfigurationError
from command_hooks.core.common.logging_utils import (
    configure_logging_with_environment_tagging,
)
from command_hooks.core.config.app_config import AppConfig, LogLevel, load_config
from command_hooks.core.services.command_service import CommandService
from command_hooks.core.services.webhook_dispatcher import HttpxWebhookDispatcher

logger = logging.getLogger(__name__)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="command-hooks",
        description="Process chat messages against registered webhook commands",
    )
    parser.add_argument(
        "messages",
        nargs="*",
        help="Chat messages to process; read from stdin when omitted",
    )
    parser.add_argument("--config", dest="config_file", help="YAML configuration file")
    parser.add_argument("--database-url", help="SQLite database path")
    parser.add_argument(
        "--storage",
        choices=[backend.value for backend in StorageBackend],
        help="Command store backend",
    )
    parser.add_argument("--command-prefix", help="Prefix that marks bot commands")
    parser.add_argument("--timeout", type=float, help="Webhook timeout in seconds")
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        help="Logging level",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def apply_cli_args(args: argparse.Namespace) -> AppConfig:
    """Load configuration and apply CLI overrides on top of it."""
    cfg = load_config(args.config_file)
    data: dict[str, Any] = cfg.model_dump(mode="json")

    if args.command_prefix is not None:
        error = validate_command_prefix(args.command_prefix)
        if error:
            raise ConfigurationError(f"Invalid --command-prefix: {error}")
        data["command_prefix"] = args.command_prefix
    if args.database_url is not None:
        data["storage"]["database_url"] = args.database_url
    if args.storage is not None:
        data["storage"]["backend"] = args.storage
    if args.timeout is not None:
        data["dispatch"]["timeout"] = args.timeout
    if args.log_level is not None:
        data["logging"]["level"] = args.log_level
    if args.log_file is not None:
        data["logging"]["log_file"] = args.log_file

    try:
        return AppConfig.model_validate(data)
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _configure_logging(cfg: AppConfig) -> None:
    configure_logging_with_environment_tagging(
        level=getattr(logging, cfg.logging.level.value),
        log_file=cfg.logging.log_file,
    )


async def process_messages(
    service: CommandService, messages: Iterable[str], out: TextIO
) -> int:
    """Handle each message and print its reply; returns the number of failures."""

    async def notify(text: str) -> None:
        out.write(text + "\n")
        out.flush()

    failures = 0
    for message in messages:
        message = message.rstrip("\n")
        if not message.strip():
            continue
        result = await service.handle_message(message, notify=notify)
        if result is None:
            out.write(
                f"(ignored: message does not start with {service.command_prefix!r})\n"
            )
            continue
        if not result.success:
            failures += 1
        out.write(result.message + "\n")
        out.flush()
    return failures


async def _run(cfg: AppConfig, messages: Iterable[str], out: TextIO) -> int:
    dispatcher: HttpxWebhookDispatcher | None = None
    service: CommandService | None = None
    try:
        dispatcher = HttpxWebhookDispatcher(timeout=cfg.dispatch.timeout)
        service = build_command_service(cfg, dispatcher=dispatcher)
        return await process_messages(service, messages, out)
    finally:
        if dispatcher is not None:
            await dispatcher.aclose()
        if service is not None:
            close = getattr(service.repository, "close", None)
            if callable(close):
                close()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_cli_parser().parse_args(argv)
    try:
        cfg = apply_cli_args(args)
    except ConfigurationError as e:
        sys.stderr.write(f"ERROR: {e.message}\n")
        return 2

    _configure_logging(cfg)
    logger.debug("Loaded configuration: %s", cfg.model_dump(mode="json"))

    messages: Iterable[str] = args.messages or sys.stdin
    failures = asyncio.run(_run(cfg, messages, sys.stdout))
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
