from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any


class FilterState(Mapping[str, str]):
    """Immutable filter criteria for one domain list view.

    Every declared field always carries a string; ``""`` means no constraint.
    """

    __slots__ = ("_values",)

    def __init__(self, fields: Iterable[str], values: Mapping[str, Any] | None = None) -> None:
        ordered = tuple(dict.fromkeys(fields))
        if not ordered:
            raise ValueError("FilterState needs at least one field")
        base = {name: "" for name in ordered}
        if values:
            unknown = sorted(set(values) - set(base))
            if unknown:
                raise KeyError(f"Unknown filter fields: {unknown}")
            base.update({name: _coerce(value) for name, value in values.items()})
        self._values: dict[str, str] = base

    @classmethod
    def empty(cls, fields: Iterable[str]) -> "FilterState":
        return cls(fields)

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self._values)

    def merge(self, changes: Mapping[str, Any] | None = None, **kwargs: Any) -> "FilterState":
        updates = {**(changes or {}), **kwargs}
        return FilterState(self.fields, {**self._values, **updates})

    def cleared(self) -> "FilterState":
        return FilterState(self.fields)

    @property
    def is_clear(self) -> bool:
        return not any(self._values.values())

    def as_query(self) -> dict[str, str]:
        return {key: value for key, value in self._values.items() if value != ""}

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FilterState):
            return self._values == other._values
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._values.items()))

    def __repr__(self) -> str:
        active = ", ".join(f"{key}={value!r}" for key, value in self.as_query().items())
        return f"FilterState({active or 'clear'})"


def _coerce(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
