from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from ..exceptions import ValidationError
from ..models import StatsModel
from .actions import ActionCatalog, EntityOperation
from .filter_state import FilterState

ADMIN_API_PREFIX = "/api/admin"


class NotifyScope(str, Enum):
    NONE = "none"
    # POST <resource>/notify with explicit entity ids
    SELECTION = "selection"
    # POST <resource>/<id>/notify with recipient classes of that one entity
    ENTITY = "entity"


@dataclass(frozen=True)
class DomainSpec:
    """Maps the generic engine onto one entity shape (users, courts, ...).

    ``resource`` is the path under ``/api/admin`` and defaults to ``name``.
    Domains with ``batch_updates=False`` have no ``bulk-update`` endpoint, so a
    bulk action is sent entity by entity through each payload's route.
    ``parent`` names a filter field that, when set, moves the listing under
    ``<parent resource>/<id>/<name>``.
    """

    name: str
    label: str
    items_key: str
    filter_fields: tuple[str, ...]
    stats_model: type[StatsModel]
    actions: ActionCatalog
    statuses: frozenset[str]
    reason_required_statuses: frozenset[str] = frozenset()
    recipient_classes: frozenset[str] = frozenset()
    resource: str = ""
    ids_key: str = "ids"
    batch_updates: bool = True
    notify_scope: NotifyScope = NotifyScope.NONE
    exportable: bool = True
    parent: tuple[str, str] | None = None
    operations: tuple[EntityOperation, ...] = ()

    def empty_filters(self) -> FilterState:
        return FilterState.empty(self.filter_fields)

    def path(self, *parts: object) -> str:
        suffix = "/".join(str(part) for part in parts)
        base = f"{ADMIN_API_PREFIX}/{self.resource or self.name}"
        return f"{base}/{suffix}" if suffix else base

    def list_path(self, query: Mapping[str, str]) -> tuple[str, dict[str, str]]:
        params = dict(query)
        if self.parent is not None:
            parent_resource, parent_field = self.parent
            parent_id = params.pop(parent_field, "")
            if parent_id:
                return f"{ADMIN_API_PREFIX}/{parent_resource}/{parent_id}/{self.name}", params
        return self.path(), params

    def operation(self, name: str) -> EntityOperation:
        for operation in self.operations:
            if operation.name == name:
                return operation
        raise ValidationError(message=f"Unknown {self.label} operation: {name}", code="UNKNOWN_OPERATION")

    def export_filename(self, iso_date: str, export_format: str) -> str:
        return f"{self.name}-export-{iso_date}.{export_format}"

    def empty_stats(self) -> StatsModel:
        return self.stats_model()
