from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Protocol


class DisplaysIds(Protocol):
    @property
    def ids(self) -> list[int]: ...


class SelectionSet:
    """Ids checked for bulk operations.

    Membership is never pruned on filter changes; callers use ``visible_in`` to
    highlight only rows that are on the current page.
    """

    def __init__(self, ids: Iterable[int] = ()) -> None:
        self._ids: set[int] = {int(entity_id) for entity_id in ids}

    def add(self, entity_id: int) -> None:
        self._ids.add(int(entity_id))

    def remove(self, entity_id: int) -> None:
        self._ids.discard(int(entity_id))

    def toggle(self, entity_id: int, included: bool | None = None) -> bool:
        if included is None:
            included = int(entity_id) not in self._ids
        if included:
            self.add(entity_id)
        else:
            self.remove(entity_id)
        return included

    def set_all(self, ids: Iterable[int]) -> None:
        self._ids = {int(entity_id) for entity_id in ids}

    def clear(self) -> None:
        self._ids.clear()

    def replace_with_entire_collection(self, collection: DisplaysIds) -> None:
        # page-scoped: only the rows currently displayed
        self.set_all(collection.ids)

    def replace_with_empty(self) -> None:
        self.clear()

    def visible_in(self, collection: DisplaysIds) -> list[int]:
        return [entity_id for entity_id in collection.ids if entity_id in self._ids]

    @property
    def ids(self) -> frozenset[int]:
        return frozenset(self._ids)

    @property
    def count(self) -> int:
        return len(self._ids)

    @property
    def is_empty(self) -> bool:
        return not self._ids

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._ids

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"SelectionSet({sorted(self._ids)})"
