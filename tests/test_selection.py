from __future__ import annotations

from federation_console.engine.selection import SelectionSet
from conftest import rows


def test_toggle_and_remove() -> None:
    selection = SelectionSet()

    assert selection.toggle(4) is True
    assert selection.toggle(4) is False
    selection.toggle(5, included=True)
    selection.toggle(5, included=True)
    selection.remove(99)

    assert selection.ids == frozenset({5})
    assert selection.count == 1


def test_clear_on_empty_selection_is_a_noop() -> None:
    selection = SelectionSet()

    selection.clear()
    selection.clear()

    assert selection.is_empty
    assert selection.ids == frozenset()
    assert list(selection) == []


def test_selection_survives_filter_change(loaded_console, gateway, runner) -> None:
    for entity_id in (10, 11, 12):
        loaded_console.selection.add(entity_id)

    gateway.pages.append(rows(20, 21))
    loaded_console.update_filters(status="approved")
    runner.complete_all()

    assert loaded_console.selection.ids == frozenset({10, 11, 12})
    assert loaded_console.visible_selection == []


def test_select_all_only_covers_the_current_page(console, gateway, runner) -> None:
    gateway.total = 9
    gateway.pages.append(rows(1, 2, 3))
    console.mount()
    runner.complete_all()

    console.select_all_on_page()

    assert console.selection.ids == frozenset({1, 2, 3})
    assert console.visible_selection == [1, 2, 3]


def test_replace_with_empty_drops_everything() -> None:
    selection = SelectionSet([1, 2])

    selection.replace_with_empty()

    assert selection.is_empty
