from __future__ import annotations

import pytest

from command_hooks.core.common.exceptions import (
    RegistrationParseError,
    SchemaViolationError,
)
from command_hooks.core.domain.commands import CommandDefinition
from command_hooks.core.repositories.in_memory_command_repository import (
    InMemoryCommandRepository,
)
from command_hooks.core.services.command_registration import (
    CommandRegistrationService,
)


@pytest.fixture
def store() -> InMemoryCommandRepository:
    return InMemoryCommandRepository()


@pytest.fixture
def service(store: InMemoryCommandRepository) -> CommandRegistrationService:
    return CommandRegistrationService(store)


@pytest.mark.asyncio
async def test_register_from_text_stores_definition(
    service: CommandRegistrationService, store: InMemoryCommandRepository
) -> None:
    definition = await service.register_from_text(
        "trigger deployment --description Deploy now --urlCall https://x.test/h "
        "[--argKey: id --required: true]"
    )

    assert await store.get("trigger deployment") == definition
    assert definition.args[0].required is True


@pytest.mark.asyncio
async def test_register_from_text_accepts_pasted_chat_command(
    service: CommandRegistrationService, store: InMemoryCommandRepository
) -> None:
    await service.register_from_text("/command register ping --urlCall https://x.test/p")
    assert await store.get("ping") is not None


@pytest.mark.asyncio
async def test_reregistering_overwrites(
    service: CommandRegistrationService, store: InMemoryCommandRepository
) -> None:
    await service.register_from_text("ping --urlCall https://x.test/one")
    await service.register_from_text("ping --urlCall https://x.test/two")

    commands = await store.list()
    assert len(commands) == 1
    assert commands[0].url_call == "https://x.test/two"


@pytest.mark.asyncio
async def test_duplicate_alias_rejected_before_store(
    service: CommandRegistrationService, store: InMemoryCommandRepository
) -> None:
    with pytest.raises(SchemaViolationError, match="Duplicate arg alias: a"):
        await service.register_from_text(
            "ping --urlCall https://x.test/h [--argKey a] [--argKey b --argKeyAlias a]"
        )
    assert await store.list() == []


@pytest.mark.asyncio
async def test_missing_url_call_performs_no_write(
    service: CommandRegistrationService, store: InMemoryCommandRepository
) -> None:
    with pytest.raises(RegistrationParseError, match="Missing --urlCall"):
        await service.register_from_text("ping --description nothing")
    assert await store.list() == []


@pytest.mark.asyncio
async def test_register_from_form_uses_wire_names(
    service: CommandRegistrationService,
) -> None:
    definition = await service.register_from_form(
        {
            "key": "deploy",
            "description": "",
            "urlCall": "https://x.test/deploy",
            "args": [
                {"argKey": "id", "argKeyAlias": "", "required": "true"},
                {"argKey": "env", "defaultValue": "prod"},
            ],
            "unrelated": "ignored",
        }
    )

    assert definition.description is None
    assert definition.args[0].alias is None
    assert definition.args[0].required is True
    assert definition.args[1].default_value == "prod"


@pytest.mark.asyncio
async def test_form_and_text_enforce_same_invariants(
    service: CommandRegistrationService, store: InMemoryCommandRepository
) -> None:
    with pytest.raises(SchemaViolationError, match="Duplicate arg key: id"):
        await service.register_from_form(
            {
                "key": "deploy",
                "urlCall": "https://x.test/deploy",
                "args": [{"argKey": "id"}, {"argKey": "id"}],
            }
        )
    with pytest.raises(SchemaViolationError, match="urlCall"):
        await service.register_from_form({"key": "deploy", "urlCall": "ftp:/nope"})
    with pytest.raises(SchemaViolationError, match="key"):
        await service.register_from_form({"key": "  ", "urlCall": "https://x.test/"})
    assert await store.list() == []


@pytest.mark.asyncio
async def test_form_rename_removes_old_key_after_validation(
    service: CommandRegistrationService, store: InMemoryCommandRepository
) -> None:
    await service.register_from_text("deploy --urlCall https://x.test/deploy")

    with pytest.raises(SchemaViolationError):
        await service.register_from_form(
            {
                "key": "ship",
                "urlCall": "https://x.test/deploy",
                "args": [{"argKey": "a", "argKeyAlias": "a"}],
            },
            old_key="deploy",
        )
    assert await store.get("deploy") is not None

    await service.register_from_form(
        {"key": "ship", "urlCall": "https://x.test/deploy"}, old_key="deploy"
    )
    assert await store.get("deploy") is None
    assert await store.get("ship") is not None


@pytest.mark.asyncio
async def test_form_payload_must_be_mapping(
    service: CommandRegistrationService,
) -> None:
    with pytest.raises(SchemaViolationError):
        await service.register_from_form(["not", "a", "mapping"])  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_delete_absent_key_is_noop(service: CommandRegistrationService) -> None:
    assert await service.delete("missing") is False


@pytest.mark.asyncio
async def test_register_validates_prebuilt_definition(
    service: CommandRegistrationService, store: InMemoryCommandRepository
) -> None:
    definition = CommandDefinition.model_validate(
        {
            "key": "x",
            "urlCall": "https://x.test/",
            "args": [{"argKey": "a"}, {"argKey": "b", "argKeyAlias": "a"}],
        }
    )
    with pytest.raises(SchemaViolationError):
        await service.register(definition)
    assert await store.list() == []
