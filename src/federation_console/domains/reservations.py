from __future__ import annotations

from typing import Literal

from ..engine.actions import ActionCatalog, BulkActionPayload
from ..engine.domain import DomainSpec
from ..models import StatsModel


class CancelReservations(BulkActionPayload):
    label = "Cancel"

    action: Literal["cancel"] = "cancel"


class CompleteReservations(BulkActionPayload):
    label = "Mark completed"

    action: Literal["complete"] = "complete"


class MarkNoShow(BulkActionPayload):
    label = "Mark no-show"

    action: Literal["no_show"] = "no_show"


# GET courts/reservations answers with a bare list, so there are no stats
RESERVATIONS = DomainSpec(
    name="reservations",
    label="reservations",
    items_key="reservations",
    filter_fields=("courtId", "status", "searchTerm", "dateFrom", "dateTo"),
    stats_model=StatsModel,
    actions=ActionCatalog([CancelReservations, CompleteReservations, MarkNoShow]),
    statuses=frozenset({"active", "completed", "cancelled", "no_show"}),
    resource="courts/reservations",
    ids_key="reservationIds",
    exportable=False,
)
