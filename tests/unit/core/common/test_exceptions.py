from __future__ import annotations

import pytest

from command_hooks.core.common.exceptions import (
    ArgumentParsingError,
    CommandHooksError,
    CommandNotFoundError,
    ConfigurationError,
    DispatchError,
    ParsingError,
    RegistrationParseError,
    SchemaViolationError,
    StorageError,
)


@pytest.mark.parametrize(
    ("exc_type", "status_code"),
    [
        (SchemaViolationError, 400),
        (ParsingError, 422),
        (ArgumentParsingError, 422),
        (RegistrationParseError, 422),
        (CommandNotFoundError, 404),
        (DispatchError, 502),
        (ConfigurationError, 400),
        (StorageError, 500),
    ],
)
def test_status_codes(exc_type: type[CommandHooksError], status_code: int) -> None:
    error = exc_type()
    assert isinstance(error, CommandHooksError)
    assert error.status_code == status_code


def test_parsing_errors_share_base() -> None:
    assert issubclass(ArgumentParsingError, ParsingError)
    assert issubclass(RegistrationParseError, ParsingError)


def test_to_dict_includes_extra_attributes() -> None:
    error = DispatchError("boom", url="https://x.test/", details={"attempt": 1})

    assert error.to_dict() == {
        "error": {
            "message": "boom",
            "type": "DispatchError",
            "details": {"attempt": 1},
            "url": "https://x.test/",
        }
    }


def test_message_is_str() -> None:
    error = CommandNotFoundError()
    assert str(error) == "Unknown command."
    assert error.details == {}
