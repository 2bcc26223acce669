from __future__ import annotations

import pytest

from federation_console.error_mapper import map_error
from federation_console.exceptions import ExportError
from federation_console.ui.notification_center import NotificationCenter
from federation_console.ui.view_state import CollectionViewStatus, resolve_view_state


@pytest.mark.parametrize(
    ("loading", "has_data", "error", "expected"),
    [
        (True, False, None, CollectionViewStatus.LOADING),
        (True, True, "stale", CollectionViewStatus.LOADING),
        (False, False, "boom", CollectionViewStatus.FATAL),
        (False, True, "boom", CollectionViewStatus.ERROR_WITH_DATA),
        (False, False, None, CollectionViewStatus.EMPTY),
        (False, True, None, CollectionViewStatus.SUCCESS),
    ],
)
def test_resolve_view_state(loading, has_data, error, expected) -> None:
    state = resolve_view_state(loading=loading, has_data=has_data, error=error, trace_id="t-1")

    assert state.status is expected
    assert state.render()["trace_id"] == "t-1"


def test_notification_center_collects_toasts() -> None:
    center = NotificationCenter()

    center.toast(level="success", message="Approve: 2 courts updated", trace_id="t-2")
    center.toast(level="error", message="Mail relay unavailable", details={"code": "SERVER_ERROR"})

    rendered = center.render()
    assert rendered["count"] == 2
    assert center.latest["details"] == {"code": "SERVER_ERROR"}

    with pytest.raises(ValueError):
        center.toast(level="fatal", message="nope")

    center.clear()
    assert center.latest is None


def test_toast_error_carries_user_facing_details() -> None:
    center = NotificationCenter()
    api = map_error(502, {"message": "Mail relay unavailable", "details": {"relay": "smtp-2"}}, "t-3")

    center.toast_error(api)
    center.toast_error(ExportError(message="  ", code="EXPORT_UNSUPPORTED"))

    first, second = center.items
    assert first["message"] == "Mail relay unavailable"
    assert first["trace_id"] == "t-3"
    assert first["details"] == {"code": "SERVER_ERROR", "technical": "SERVER_ERROR (HTTP 502): {'relay': 'smtp-2'}"}
    assert second["message"] == "Request failed"
    assert second["details"] == {"code": "EXPORT_UNSUPPORTED", "technical": "EXPORT_UNSUPPORTED"}


def test_fatal_state_keeps_technical_details() -> None:
    state = resolve_view_state(loading=False, has_data=False, error="boom", details="SERVER_ERROR (HTTP 500)")

    assert state.render()["details"] == "SERVER_ERROR (HTTP 500)"
    assert resolve_view_state(loading=False, has_data=True, error=None, details="ignored").details is None
