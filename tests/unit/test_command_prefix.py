import pytest

from command_hooks.command_prefix import validate_command_prefix


@pytest.mark.parametrize("prefix", ["/", "!", "#", "!!", "bot:", "/hooks"])
def test_valid_prefixes(prefix: str) -> None:
    assert validate_command_prefix(prefix) is None


@pytest.mark.parametrize(
    ("prefix", "message"),
    [
        ("", "non-empty"),
        ("a b", "whitespace"),
        ("\t!", "whitespace"),
        ("x" * 11, "10 characters"),
        ("é", "printable"),
        ("bot-", "dash"),
    ],
)
def test_invalid_prefixes(prefix: str, message: str) -> None:
    error = validate_command_prefix(prefix)
    assert error is not None
    assert message in error
