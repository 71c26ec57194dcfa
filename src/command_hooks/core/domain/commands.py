"""
Command domain models.

A command binds a chat-text key to a webhook URL and an argument schema.
Field names follow Python conventions; the wire names used by stored rows and
form payloads (``argKey``, ``argKeyAlias``, ``defaultValue``, ``urlCall``) are
accepted as aliases and used when serializing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import (
    AnyHttpUrl,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from command_hooks.core.common.exceptions import SchemaViolationError
from command_hooks.core.interfaces.model_bases import DomainModel, InternalDTO

ParsedArguments = dict[str, str]

_URL_ADAPTER: TypeAdapter[AnyHttpUrl] = TypeAdapter(AnyHttpUrl)


class ArgumentSpec(DomainModel):
    """One named argument of a command."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    key: str = Field(alias="argKey", min_length=1)
    alias: str | None = Field(default=None, alias="argKeyAlias")
    required: bool = False
    default_value: str | None = Field(default=None, alias="defaultValue")
    description: str | None = None

    @field_validator("alias", "description", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def has_default(self) -> bool:
        return self.default_value is not None

    def usage(self) -> str:
        """Render as ``--key (-alias)`` for listings."""
        text = f"--{self.key}"
        if self.alias:
            text += f" (-{self.alias})"
        return text


class CommandDefinition(DomainModel):
    """A registrable, invocable command."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    key: str = Field(min_length=1)
    description: str | None = None
    url_call: str = Field(alias="urlCall")
    args: list[ArgumentSpec] = Field(default_factory=list)

    @field_validator("key", mode="before")
    @classmethod
    def strip_key(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("url_call")
    @classmethod
    def validate_url_call(cls, v: str) -> str:
        # Validate only; the stored value stays exactly as the operator typed it
        try:
            _URL_ADAPTER.validate_python(v)
        except ValidationError as e:
            raise ValueError(f"invalid URL {v!r}, expected an absolute http(s) URL") from e
        return v

    @field_validator("args", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    def validate_argument_names(self) -> None:
        """Ensure no argument key or alias is used twice within the command.

        Raises:
            SchemaViolationError: On the first duplicate found
        """
        seen: set[str] = set()
        for arg in self.args:
            if arg.key in seen:
                raise SchemaViolationError(
                    f"Duplicate arg key: {arg.key}",
                    details={"command": self.key, "name": arg.key},
                )
            seen.add(arg.key)
            if arg.alias:
                if arg.alias in seen:
                    raise SchemaViolationError(
                        f"Duplicate arg alias: {arg.alias}",
                        details={"command": self.key, "name": arg.alias},
                    )
                seen.add(arg.alias)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with the wire field names."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class CommandMatch(InternalDTO):
    """A command matched against chat text, with the text left for its arguments."""

    command: CommandDefinition
    args_string: str


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into ``field: reason`` pairs for display."""
    parts: list[str] = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "value"
        message = str(item.get("msg", "invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        parts.append(f"{location}: {message}")
    return "; ".join(parts)


def build_argument_spec(data: Any) -> ArgumentSpec:
    """Validate raw data as an ArgumentSpec.

    Raises:
        SchemaViolationError: If the data does not fit the ArgumentSpec shape
    """
    try:
        return ArgumentSpec.model_validate(data)
    except ValidationError as e:
        raise SchemaViolationError(
            f"Invalid argument definition: {describe_validation_error(e)}"
        ) from e


def build_command_definition(data: Any) -> CommandDefinition:
    """Validate raw data (form payload or stored row) as a CommandDefinition.

    Raises:
        SchemaViolationError: If the data does not fit the CommandDefinition shape
    """
    if isinstance(data, CommandDefinition):
        return data
    try:
        return CommandDefinition.model_validate(data)
    except ValidationError as e:
        raise SchemaViolationError(
            f"Invalid command definition: {describe_validation_error(e)}"
        ) from e
