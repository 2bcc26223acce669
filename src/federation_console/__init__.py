from .bootstrap import ConsoleBootstrap
from .config import ConfigError, ConsoleConfig, load_config
from .engine import (
    BulkActionExecutor,
    BulkActionState,
    CollectionConsole,
    CollectionStore,
    FilterState,
    InlineRunner,
    NotificationTarget,
    NotifyScope,
    OperationRunner,
    PaginationState,
    SelectionSet,
    ThreadedRunner,
)
from .exceptions import (
    ApiError,
    ConsoleError,
    ExportError,
    FetchError,
    MutationError,
    NotificationError,
    ValidationError,
)
from .http_client import HttpClient

__all__ = [
    "ApiError",
    "BulkActionExecutor",
    "BulkActionState",
    "CollectionConsole",
    "CollectionStore",
    "ConfigError",
    "ConsoleBootstrap",
    "ConsoleConfig",
    "ConsoleError",
    "ExportError",
    "FetchError",
    "FilterState",
    "HttpClient",
    "InlineRunner",
    "MutationError",
    "NotificationError",
    "NotificationTarget",
    "NotifyScope",
    "OperationRunner",
    "PaginationState",
    "SelectionSet",
    "ThreadedRunner",
    "ValidationError",
    "load_config",
]
