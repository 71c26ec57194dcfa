from __future__ import annotations

from pathlib import Path

from command_hooks.core.app.application_factory import (
    build_command_service,
    build_repository,
)
from command_hooks.core.config.app_config import AppConfig
from command_hooks.core.repositories.in_memory_command_repository import (
    InMemoryCommandRepository,
)
from command_hooks.core.repositories.sqlite_command_repository import (
    SqliteCommandRepository,
)
from command_hooks.core.services.webhook_dispatcher import HttpxWebhookDispatcher


def test_memory_backend() -> None:
    cfg = AppConfig.model_validate({"storage": {"backend": "memory"}})
    assert isinstance(build_repository(cfg), InMemoryCommandRepository)


def test_sqlite_backend(tmp_path: Path) -> None:
    db = tmp_path / "db" / "commands.db"
    cfg = AppConfig.model_validate(
        {"storage": {"backend": "sqlite", "database_url": str(db)}}
    )

    repo = build_repository(cfg)
    try:
        assert isinstance(repo, SqliteCommandRepository)
        assert db.exists()
    finally:
        repo.close()


def test_service_wiring_follows_config() -> None:
    cfg = AppConfig.model_validate(
        {
            "command_prefix": "!",
            "storage": {"backend": "memory"},
            "dispatch": {"timeout": 3, "response_preview_chars": 42},
        }
    )
    repo = InMemoryCommandRepository()

    service = build_command_service(cfg, repository=repo)

    assert service.repository is repo
    assert service.registration.repository is repo
    assert service.command_prefix == "!"
    assert service.registration.command_prefix == "!"
    assert service.response_preview_chars == 42
    assert isinstance(service.dispatcher, HttpxWebhookDispatcher)
    assert service.dispatcher.timeout == 3.0
