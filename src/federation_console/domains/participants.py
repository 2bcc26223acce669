from __future__ import annotations

from typing import Literal, get_args

from ..engine.actions import ActionCatalog, BulkActionPayload
from ..engine.domain import DomainSpec
from ..models import StatsModel

ParticipantStatus = Literal["registered", "confirmed", "checked_in", "disqualified", "withdrew"]


class SetParticipantStatus(BulkActionPayload):
    label = "Change status"

    action: Literal["status"] = "status"
    status: ParticipantStatus


class CheckInParticipants(BulkActionPayload):
    label = "Check in"

    action: Literal["check_in"] = "check_in"


class CheckOutParticipants(BulkActionPayload):
    label = "Check out"

    action: Literal["check_out"] = "check_out"


class DisqualifyParticipants(BulkActionPayload):
    label = "Disqualify"

    action: Literal["disqualify"] = "disqualify"


class WithdrawParticipants(BulkActionPayload):
    label = "Withdraw"

    action: Literal["withdraw"] = "withdraw"


class AssignSeeds(BulkActionPayload):
    label = "Assign seeds"

    action: Literal["assign_seeds"] = "assign_seeds"


PARTICIPANTS = DomainSpec(
    name="participants",
    label="participants",
    items_key="participants",
    filter_fields=("tournamentId", "status", "searchTerm"),
    stats_model=StatsModel,
    actions=ActionCatalog(
        [
            SetParticipantStatus,
            CheckInParticipants,
            CheckOutParticipants,
            DisqualifyParticipants,
            WithdrawParticipants,
            AssignSeeds,
        ]
    ),
    statuses=frozenset(get_args(ParticipantStatus)),
    reason_required_statuses=frozenset({"disqualified"}),
    resource="tournaments/participants",
    ids_key="participantIds",
    exportable=False,
    parent=("tournaments", "tournamentId"),
)
