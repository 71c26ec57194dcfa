from enum import Enum

DEFAULT_COMMAND_PREFIX: str = "/"
DEFAULT_DATABASE_URL: str = "data/commands.db"
DEFAULT_DISPATCH_TIMEOUT: float = 30.0
DEFAULT_RESPONSE_PREVIEW_CHARS: int = 500

# Built-in chat commands handled before custom command matching
BUILTIN_COMMAND_NAMESPACE: str = "command"
BUILTIN_HELP: str = "help"


class StorageBackend(str, Enum):
    """Enum for supported command store backends."""

    SQLITE = "sqlite"
    MEMORY = "memory"
