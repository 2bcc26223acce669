from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError

ReasonText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class BulkActionPayload(BaseModel):
    """One tagged variant per bulk action id.

    Subclasses pin ``action`` to a ``Literal`` and declare the fields the action
    needs; a required ``reason: ReasonText`` makes the action reason-gated.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    label: ClassVar[str] = ""
    target_status: ClassVar[str | None] = None

    action: str

    @classmethod
    def action_id(cls) -> str:
        return str(cls.model_fields["action"].default)

    @classmethod
    def requires_reason(cls) -> bool:
        field = cls.model_fields.get("reason")
        return field is not None and field.is_required()

    def data(self) -> dict[str, Any] | None:
        body = self.model_dump(mode="json", exclude={"action"}, exclude_none=True)
        return body or None

    def entity_route(self) -> tuple[str, str, dict[str, Any] | None]:
        """Method, path segment and body used when each entity is updated on its own.

        Status transitions go through ``PUT <id>/status``; every other action
        posts to its own ``<id>/<action>`` endpoint.
        """
        body = self.data()
        if self.target_status is not None:
            body = {"status": self.target_status, **(body or {})}
        if body and "status" in body:
            return "PUT", "status", body
        return "POST", self.action, body


class ActionCatalog:
    def __init__(self, variants: Iterable[type[BulkActionPayload]]) -> None:
        self._variants: dict[str, type[BulkActionPayload]] = {}
        for variant in variants:
            action_id = variant.action_id()
            if action_id in self._variants:
                raise ValueError(f"Duplicate bulk action id: {action_id}")
            self._variants[action_id] = variant

    @property
    def action_ids(self) -> tuple[str, ...]:
        return tuple(self._variants)

    def __contains__(self, action_id: object) -> bool:
        return action_id in self._variants

    def variant(self, action_id: str) -> type[BulkActionPayload]:
        try:
            return self._variants[action_id]
        except KeyError:
            raise ValidationError(message=f"Unknown bulk action: {action_id}", code="UNKNOWN_ACTION") from None

    def label(self, action_id: str) -> str:
        variant = self.variant(action_id)
        return variant.label or action_id.replace("_", " ").capitalize()

    def requires_reason(self, action_id: str) -> bool:
        return self.variant(action_id).requires_reason()

    def parse(self, action_id: str, payload: Mapping[str, Any] | None = None) -> BulkActionPayload:
        variant = self.variant(action_id)
        try:
            return variant.model_validate({**(payload or {}), "action": action_id})
        except PydanticValidationError as exc:
            raise ValidationError(
                message=_describe(self.label(action_id), exc),
                code="ACTION_PRECONDITION_FAILED",
                details=exc.errors(include_url=False),
            ) from exc


@dataclass(frozen=True)
class BulkMutationRequest:
    action_id: str
    target_ids: frozenset[int]
    payload: BulkActionPayload

    def __post_init__(self) -> None:
        if not self.target_ids:
            raise ValidationError(message="Select at least one row before running a bulk action", code="EMPTY_SELECTION")
        if self.payload.action != self.action_id:
            raise ValueError(f"Payload variant {self.payload.action!r} does not match action {self.action_id!r}")

    @property
    def sorted_ids(self) -> list[int]:
        return sorted(self.target_ids)


def _describe(label: str, exc: PydanticValidationError) -> str:
    messages = []
    for error in exc.errors(include_url=False):
        field = ".".join(str(part) for part in error.get("loc", ()))
        message = str(error.get("msg", "")).removeprefix("Value error, ")
        if field == "reason":
            messages.append(f"A reason is required to {label.lower()}")
        elif field:
            messages.append(f"{field}: {message}")
        else:
            messages.append(message)
    return "; ".join(messages) or f"Invalid payload for {label}"


@dataclass(frozen=True)
class EntityOperation:
    """A single-entity endpoint outside list/detail/status, e.g. ``users/<id>/premium``.

    ``body_model`` and ``query_model`` validate caller input before any request
    is built. Operations that ``mutates`` the entity trigger a collection refresh.
    """

    name: str
    method: str
    segment: str
    label: str
    body_model: type[BaseModel] | None = None
    query_model: type[BaseModel] | None = None
    mutates: bool = False

    def prepare(self, values: Mapping[str, Any] | None = None) -> tuple[dict[str, Any] | None, dict[str, Any] | None]:
        values = dict(values or {})
        if self.body_model is None and self.query_model is None and values:
            raise ValidationError(
                message=f"{self.label} takes no input",
                code="ACTION_PRECONDITION_FAILED",
                details={"unexpected": sorted(values)},
            )
        body = self._validate(self.body_model, values)
        query = self._validate(self.query_model, values)
        return body, query

    def _validate(self, model: type[BaseModel] | None, values: dict[str, Any]) -> dict[str, Any] | None:
        if model is None:
            return None
        try:
            return model.model_validate(values).model_dump(mode="json", exclude_none=True)
        except PydanticValidationError as exc:
            raise ValidationError(
                message=_describe(self.label, exc),
                code="ACTION_PRECONDITION_FAILED",
                details=exc.errors(include_url=False),
            ) from exc
