from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..engine.actions import BulkMutationRequest, EntityOperation
from ..engine.domain import DomainSpec, NotifyScope
from ..engine.gateway import ExportFile, ListPage, NotificationTarget
from ..exceptions import ApiError
from ..http_client import CancelCheck
from ..logger import get_logger, log_action
from ..models import Ack, BulkUpdateBody, NotifyBody, PageMeta, StatsModel, StatusUpdateBody
from ..normalizers import normalize_listing
from .base import BaseClient

logger = get_logger("federation_console.client")


@dataclass
class CollectionClient(BaseClient):
    """REST collaborator for one admin resource under ``/api/admin``."""

    domain: DomainSpec | None = None
    default_page_size: int = 50
    last_trace_id: str | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.domain is None:
            raise ValueError("CollectionClient requires a domain")

    @property
    def spec(self) -> DomainSpec:
        assert self.domain is not None
        return self.domain

    def list_page(
        self,
        query: Mapping[str, str],
        *,
        page: int = 1,
        page_size: int | None = None,
        cancel_check: CancelCheck | None = None,
    ) -> ListPage:
        limit = page_size or self.default_page_size
        path, filters = self.spec.list_path(query)
        data = self._request(
            "GET",
            path,
            params={**filters, "page": page, "limit": limit},
            module=self.spec.name,
            operation="list",
            cancel_check=cancel_check,
        )
        listing = normalize_listing(data, items_key=self.spec.items_key, page=page, page_size=limit)
        return ListPage(
            items=listing["rows"],
            stats=self._stats(listing["stats"]),
            meta=PageMeta(page=listing["page"], page_size=listing["page_size"], total=listing["total"]),
        )

    def get_detail(self, entity_id: int) -> dict[str, Any]:
        data = self._request("GET", self.spec.path(entity_id), module=self.spec.name, operation="detail")
        if not isinstance(data, dict):
            raise _invalid_payload("detail", None)
        # the users endpoint wraps the entity in a "data" envelope
        nested = data.get("data")
        return nested if isinstance(nested, dict) else data

    def update_status(self, entity_id: int, status: str, reason: str | None = None) -> dict[str, Any]:
        body = StatusUpdateBody(status=status, reason=reason)
        data = self._request(
            "PUT",
            self.spec.path(entity_id, "status"),
            json_body=body.model_dump(exclude_none=True),
            module=self.spec.name,
            operation="update_status",
        )
        return self._ack(data)

    def bulk_update(self, request: BulkMutationRequest) -> dict[str, Any]:
        if not self.spec.batch_updates:
            return self._update_each(request)
        body = BulkUpdateBody(ids=request.sorted_ids, action=request.action_id, data=request.payload.data())
        data = self._request(
            "POST",
            self.spec.path("bulk-update"),
            json_body=body.to_wire(self.spec.ids_key),
            module=self.spec.name,
            operation=f"bulk_{request.action_id}",
        )
        return self._ack(data)

    def export(self, query: Mapping[str, str], export_format: str) -> ExportFile:
        content, content_type = self._download(
            self.spec.path("export"),
            params={**query, "format": export_format},
            module=self.spec.name,
            operation="export",
        )
        return ExportFile(content=content, content_type=content_type)

    def notify(self, target: NotificationTarget, *, subject: str, message: str) -> dict[str, Any]:
        if self.spec.notify_scope is NotifyScope.ENTITY:
            if target.entity_id is None:
                raise ValueError(f"{self.spec.name} notifications need an entity id")
            path = self.spec.path(target.entity_id, "notify")
            body = NotifyBody(recipients=sorted(target.recipients), subject=subject, message=message)
        else:
            path = self.spec.path("notify")
            body = NotifyBody(ids=sorted(target.ids), subject=subject, message=message)
        data = self._request(
            "POST",
            path,
            json_body=body.to_wire(self.spec.ids_key),
            module=self.spec.name,
            operation="notify",
        )
        return self._ack(data)

    def run_operation(
        self,
        entity_id: int,
        operation: EntityOperation,
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return self._request(
            operation.method,
            self.spec.path(entity_id, operation.segment),
            json_body=body,
            params=params,
            module=self.spec.name,
            operation=operation.name,
        )

    def _update_each(self, request: BulkMutationRequest) -> dict[str, Any]:
        method, segment, body = request.payload.entity_route()
        applied: list[int] = []
        for entity_id in request.sorted_ids:
            try:
                self._request(
                    method,
                    self.spec.path(entity_id, segment),
                    json_body=body,
                    module=self.spec.name,
                    operation=f"bulk_{request.action_id}",
                )
            except ApiError as exc:
                raise replace(
                    exc,
                    details={"applied_ids": applied, "failed_id": entity_id, "cause": exc.details},
                ) from exc
            applied.append(entity_id)
        return self._ack({"success": True, "updated": len(applied)})

    def _stats(self, raw: dict[str, Any]) -> StatsModel:
        try:
            return self.spec.stats_model.model_validate(raw)
        except PydanticValidationError as exc:
            log_action(
                logger,
                self.spec.name,
                "stats",
                "ignored",
                self.http.last_operation.trace_id if self.http.last_operation else None,
                fields=sorted({str(error["loc"][0]) for error in exc.errors() if error.get("loc")}),
            )
            return self.spec.empty_stats()

    def _ack(self, data: object) -> dict[str, Any]:
        if data is None:
            ack = Ack()
        elif isinstance(data, dict):
            ack = Ack.model_validate(data)
        else:
            ack = Ack(message=str(data))
        trace_id = self.http.last_operation.trace_id if self.http.last_operation else None
        self.last_trace_id = ack.trace_id or trace_id
        return {**ack.model_dump(exclude_none=True), "trace_id": self.last_trace_id}


def _invalid_payload(section: str, exc: PydanticValidationError | None) -> ApiError:
    return ApiError(
        code="INVALID_RESPONSE",
        message=f"Unexpected {section} payload from server",
        details=exc.errors(include_url=False) if exc else None,
        trace_id=None,
        status_code=200,
    )
