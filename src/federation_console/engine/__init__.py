from .actions import ActionCatalog, BulkActionPayload, BulkMutationRequest, EntityOperation, ReasonText
from .bulk_executor import BulkActionExecutor, BulkActionState
from .collection_store import CollectionStore, FetchStatus, FetchStatusKind
from .console import CollectionConsole
from .domain import DomainSpec, NotifyScope
from .exports import DirectorySink, ExportRequestor
from .filter_state import FilterState
from .gateway import CollectionGateway, ExportFile, ListPage, NotificationTarget
from .notifications import DispatchState, NotificationDispatcher
from .operations import OperationRunner
from .pagination import PaginationState
from .runner import InlineRunner, Outcome, TaskRunner, ThreadedRunner
from .selection import SelectionSet

__all__ = [
    "ActionCatalog",
    "BulkActionExecutor",
    "BulkActionPayload",
    "BulkActionState",
    "BulkMutationRequest",
    "CollectionConsole",
    "CollectionGateway",
    "CollectionStore",
    "DirectorySink",
    "DispatchState",
    "DomainSpec",
    "EntityOperation",
    "ExportFile",
    "ExportRequestor",
    "FetchStatus",
    "FetchStatusKind",
    "FilterState",
    "InlineRunner",
    "ListPage",
    "NotificationDispatcher",
    "NotificationTarget",
    "NotifyScope",
    "OperationRunner",
    "Outcome",
    "PaginationState",
    "ReasonText",
    "SelectionSet",
    "TaskRunner",
    "ThreadedRunner",
]
