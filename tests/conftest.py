from __future__ import annotations

from pathlib import Path

import pytest

from command_hooks.core.domain.commands import ArgumentSpec, CommandDefinition
from command_hooks.core.repositories.in_memory_command_repository import (
    InMemoryCommandRepository,
)


@pytest.fixture
def deploy_command() -> CommandDefinition:
    return CommandDefinition(
        key="trigger deployment",
        description="Deploy now",
        url_call="https://hooks.example.test/deploy",
        args=[
            ArgumentSpec(key="dockerId", alias="dk", required=True),
            ArgumentSpec(key="env", alias="e", default_value="prod"),
            ArgumentSpec(key="restart", alias="r", default_value="true"),
            ArgumentSpec(key="note"),
        ],
    )


@pytest.fixture
def trigger_command() -> CommandDefinition:
    return CommandDefinition(
        key="trigger", url_call="https://hooks.example.test/trigger"
    )


@pytest.fixture
def repository(
    deploy_command: CommandDefinition, trigger_command: CommandDefinition
) -> InMemoryCommandRepository:
    return InMemoryCommandRepository([deploy_command, trigger_command])


# Provide env fixtures used by config tests
@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    env = {
        "COMMAND_PREFIX": "!",
        "DATABASE_URL": "var/hooks.db",
        "STORAGE_BACKEND": "memory",
        "DISPATCH_TIMEOUT": "12.5",
        "RESPONSE_PREVIEW_CHARS": "100",
        "LOG_LEVEL": "debug",
    }
    for k, v in env.items():
        monkeypatch.setenv(k, v)
    return env


@pytest.fixture
def temp_config_path(tmp_path: Path) -> Path:
    """Create a minimal valid YAML config file and return its path."""
    import yaml

    cfg = {
        "command_prefix": "#",
        "storage": {"backend": "sqlite", "database_url": str(tmp_path / "c.db")},
        "dispatch": {"timeout": 5},
        "logging": {"level": "WARNING"},
    }
    p = tmp_path / "app.config.yaml"
    with p.open("w", encoding="utf-8") as f:
        yaml.safe_dump(cfg, f, sort_keys=False)
    return p
