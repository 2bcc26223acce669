from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from ..models import PageMeta, StatsModel
from .actions import BulkMutationRequest, EntityOperation


@dataclass(frozen=True)
class ListPage:
    items: list[dict[str, Any]]
    stats: StatsModel
    meta: PageMeta = field(default_factory=PageMeta)


@dataclass(frozen=True)
class ExportFile:
    content: bytes
    content_type: str | None = None


@dataclass(frozen=True)
class NotificationTarget:
    """Who a message goes to.

    Either explicit entity ids, or recipient classes (``owner``,
    ``confirmed``...) of the single entity ``entity_id``.
    """

    ids: frozenset[int] = frozenset()
    recipients: frozenset[str] = frozenset()
    entity_id: int | None = None

    @classmethod
    def for_ids(cls, ids: Iterable[int]) -> "NotificationTarget":
        return cls(ids=frozenset(int(entity_id) for entity_id in ids))

    @classmethod
    def for_entity(cls, entity_id: int, *recipients: str) -> "NotificationTarget":
        return cls(recipients=frozenset(recipients), entity_id=int(entity_id))

    @property
    def is_empty(self) -> bool:
        return not self.ids and not self.recipients


class CollectionGateway(Protocol):
    """Backend collaborator for one entity domain."""

    def list_page(
        self,
        query: Mapping[str, str],
        *,
        page: int,
        page_size: int,
        cancel_check: Callable[[], bool] | None = None,
    ) -> ListPage: ...

    def get_detail(self, entity_id: int) -> dict[str, Any]: ...

    def update_status(self, entity_id: int, status: str, reason: str | None = None) -> dict[str, Any]: ...

    def bulk_update(self, request: BulkMutationRequest) -> dict[str, Any]: ...

    def export(self, query: Mapping[str, str], export_format: str) -> ExportFile: ...

    def notify(self, target: NotificationTarget, *, subject: str, message: str) -> dict[str, Any]: ...

    def run_operation(
        self,
        entity_id: int,
        operation: EntityOperation,
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any: ...
