from __future__ import annotations

import pytest

from federation_console.domains import COURTS, MICROSITES, USERS
from federation_console.engine.console import CollectionConsole
from federation_console.engine.gateway import NotificationTarget
from federation_console.engine.notifications import DispatchState
from federation_console.exceptions import NotificationError, ValidationError
from conftest import FakeGateway, api_error


@pytest.fixture
def microsite_gateway() -> FakeGateway:
    return FakeGateway(MICROSITES)


@pytest.fixture
def microsite_console(microsite_gateway, runner) -> CollectionConsole:
    return CollectionConsole(MICROSITES, microsite_gateway, runner)


def test_send_to_recipient_class_of_one_microsite(microsite_console, microsite_gateway, runner) -> None:
    notifier = microsite_console.notifier
    target = NotificationTarget.for_entity(12, "owner")

    assert notifier.send(target, "Content review", "Please update your page") is True
    assert notifier.is_sending

    runner.complete()

    call = microsite_gateway.calls_for("notify")[0]
    assert call == {
        "ids": [],
        "recipients": ["owner"],
        "entity_id": 12,
        "subject": "Content review",
        "message": "Please update your page",
    }
    assert notifier.state is DispatchState.IDLE
    assert notifier.last_outcome is DispatchState.SUCCEEDED


def test_success_does_not_refetch(microsite_console, microsite_gateway, runner) -> None:
    microsite_console.notifier.send(NotificationTarget.for_entity(4, "visitors"), "Hi", "Body")
    runner.complete()

    assert microsite_gateway.calls_for("list_page") == []


@pytest.mark.parametrize(
    ("target", "subject", "body", "code"),
    [
        (NotificationTarget.for_entity(1, "owner"), "", "Body", "SUBJECT_REQUIRED"),
        (NotificationTarget.for_entity(1, "owner"), "Subject", "  ", "BODY_REQUIRED"),
        (NotificationTarget(), "Subject", "Body", "NO_RECIPIENTS"),
        (NotificationTarget.for_entity(1), "Subject", "Body", "NO_RECIPIENTS"),
        (NotificationTarget(recipients=frozenset({"owner"})), "Subject", "Body", "ENTITY_REQUIRED"),
        (NotificationTarget.for_ids([1, 2]), "Subject", "Body", "UNSUPPORTED_TARGET"),
        (NotificationTarget.for_entity(1, "participants"), "Subject", "Body", "UNKNOWN_RECIPIENTS"),
    ],
)
def test_preconditions_checked_before_dispatch(microsite_console, microsite_gateway, runner, target, subject, body, code) -> None:
    notifier = microsite_console.notifier

    assert notifier.send(target, subject, body) is False

    assert isinstance(notifier.error, ValidationError)
    assert notifier.error.code == code
    assert microsite_gateway.calls_for("notify") == []
    assert runner.pending == []


def test_users_only_accept_explicit_ids(runner) -> None:
    gateway = FakeGateway(USERS)
    console = CollectionConsole(USERS, gateway, runner)
    console.selection.set_all([7, 3])

    assert console.notifier.send(NotificationTarget.for_entity(7, "owner"), "S", "B") is False
    assert console.notifier.error.code == "UNSUPPORTED_TARGET"
    assert console.notifier.send_to_selection("Season update", "Rankings are live") is True
    assert gateway.calls_for("notify")[0]["ids"] == [3, 7]


def test_courts_cannot_be_notified(console, gateway, runner) -> None:
    console.selection.set_all([10])

    assert console.notifier.send_to_selection("Closed", "Courts closed for the day") is False

    assert console.notifier.error.code == "NOTIFY_UNSUPPORTED"
    assert gateway.calls_for("notify") == []
    assert COURTS.recipient_classes == frozenset()


def test_failure_records_notification_error(microsite_console, microsite_gateway, runner) -> None:
    microsite_gateway.failures["notify"] = api_error(502, "Mail relay unavailable")

    microsite_console.notifier.send(NotificationTarget.for_entity(3, "subscribers"), "S", "B")
    runner.complete()

    error = microsite_console.notifier.error
    assert isinstance(error, NotificationError)
    assert error.message == "Mail relay unavailable"
    assert microsite_console.notifier.state is DispatchState.IDLE
    assert microsite_console.notifier.last_outcome is DispatchState.FAILED
    toast = microsite_console.notifications.latest
    assert toast["level"] == "error"
    assert toast["trace_id"] == "trace-err"


def test_second_send_refused_while_sending(microsite_console, microsite_gateway, runner) -> None:
    notifier = microsite_console.notifier
    notifier.send(NotificationTarget.for_entity(1, "owner"), "S", "B")

    assert notifier.send(NotificationTarget.for_entity(2, "owner"), "S", "B") is False
    assert len(microsite_gateway.calls_for("notify")) == 1
