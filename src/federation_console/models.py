from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

EXPORT_FORMATS: tuple[str, ...] = ("csv", "excel", "pdf")


class PageMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1)
    total: int = Field(default=0, ge=0)


class StatusUpdateBody(BaseModel):
    status: str
    reason: str | None = None


class BulkUpdateBody(BaseModel):
    ids: list[int] = Field(min_length=1)
    action: str
    data: dict[str, Any] | None = None

    def to_wire(self, ids_key: str) -> dict[str, Any]:
        payload = self.model_dump(exclude_none=True)
        payload[ids_key] = payload.pop("ids")
        return payload


class NotifyBody(BaseModel):
    ids: list[int] = Field(default_factory=list)
    recipients: list[str] = Field(default_factory=list)
    subject: str = Field(min_length=1)
    message: str = Field(min_length=1)

    def to_wire(self, ids_key: str) -> dict[str, Any]:
        payload: dict[str, Any] = {"subject": self.subject, "message": self.message}
        if self.ids:
            payload[ids_key] = self.ids
        if self.recipients:
            payload["recipients"] = self.recipients
        return payload


class Ack(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool = True
    message: str | None = None
    updated: int | None = None
    trace_id: str | None = None


class StatsModel(BaseModel):
    """Base for per-domain aggregate summaries; unknown counters are kept.

    Counters the backend reports as ``null`` fall back to their defaults.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data
