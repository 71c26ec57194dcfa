"""
Common exception classes for command hooks.

Every exception carries a human-readable message that can be shown verbatim
to the user who triggered the action (chat reply or dashboard banner).
"""

from __future__ import annotations

from typing import Any


class CommandHooksError(Exception):
    """Base exception class for all command hook errors."""

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
            status_code: Optional HTTP status code hint for transport adapters
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code or 500
        for key, value in (kwargs or {}).items():
            setattr(self, key, value)

    def to_dict(self) -> dict:
        error_dict = {
            "message": self.message,
            "type": self.__class__.__name__,
            "details": self.details,
        }

        for attr_name in dir(self):
            if (
                not attr_name.startswith("_")
                and attr_name not in ["message", "details", "status_code", "args"]
                and not callable(getattr(self, attr_name))
            ):
                error_dict[attr_name] = getattr(self, attr_name)

        return {"error": error_dict}


class SchemaViolationError(CommandHooksError):
    """Raised when a command definition breaks its schema invariants."""

    def __init__(
        self,
        message: str = "Invalid command definition",
        details: dict | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, details, status_code=400, **kwargs)


class ParsingError(CommandHooksError):
    """Raised when parsing fails."""

    def __init__(
        self, message: str = "Parsing failed", details: dict | None = None, **kwargs: Any
    ):
        super().__init__(message, details, status_code=422, **kwargs)


class ArgumentParsingError(ParsingError):
    """Raised when invocation arguments do not fit a command's schema."""

    def __init__(
        self,
        message: str = "Invalid command arguments",
        details: dict | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, details, **kwargs)


class RegistrationParseError(ParsingError):
    """Raised when registration text cannot be parsed."""

    def __init__(
        self,
        message: str = "Invalid registration text",
        details: dict | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, details, **kwargs)


class CommandNotFoundError(CommandHooksError):
    def __init__(
        self,
        message: str = "Unknown command.",
        details: dict | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, details, status_code=404, **kwargs)


class DispatchError(CommandHooksError):
    """Raised when the webhook cannot be reached."""

    def __init__(
        self,
        message: str = "Webhook dispatch failed",
        url: str | None = None,
        details: dict | None = None,
        **kwargs: Any,
    ):
        status_code = kwargs.pop("status_code", 502)
        super().__init__(message, details, status_code=status_code, **kwargs)
        self.url = url


class ConfigurationError(CommandHooksError):
    """Raised when there's a configuration issue."""

    def __init__(
        self,
        message: str = "Configuration error",
        details: dict | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, details, status_code=400, **kwargs)


class StorageError(CommandHooksError):
    """Raised when stored command data cannot be read back."""

    def __init__(
        self,
        message: str = "Command store error",
        details: dict | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, details, status_code=500, **kwargs)
