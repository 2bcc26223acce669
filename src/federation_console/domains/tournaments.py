from __future__ import annotations

from typing import Literal, get_args

from pydantic import Field

from ..engine.actions import ActionCatalog, BulkActionPayload, EntityOperation, ReasonText
from ..engine.domain import DomainSpec, NotifyScope
from ..models import StatsModel

TournamentStatus = Literal["upcoming", "active", "completed", "cancelled", "pending", "approved", "rejected"]


class TournamentStats(StatsModel):
    total_tournaments: int = Field(default=0, alias="totalTournaments")
    active_tournaments: int = Field(default=0, alias="activeTournaments")
    upcoming_tournaments: int = Field(default=0, alias="upcomingTournaments")
    completed_tournaments: int = Field(default=0, alias="completedTournaments")
    cancelled_tournaments: int = Field(default=0, alias="cancelledTournaments")
    total_participants: int = Field(default=0, alias="totalParticipants")
    total_revenue: float = Field(default=0, alias="totalRevenue")
    average_participants: float = Field(default=0, alias="averageParticipants")
    top_organizer: str = Field(default="", alias="topOrganizer")
    pending_approvals: int = Field(default=0, alias="pendingApprovals")


class ApproveTournaments(BulkActionPayload):
    label = "Approve"

    action: Literal["approve"] = "approve"


class RejectTournaments(BulkActionPayload):
    label = "Reject"

    action: Literal["reject"] = "reject"
    reason: ReasonText


class CancelTournaments(BulkActionPayload):
    label = "Cancel"

    action: Literal["cancel"] = "cancel"
    reason: ReasonText


class SetTournamentStatus(BulkActionPayload):
    label = "Change status"

    action: Literal["status"] = "status"
    status: Literal["upcoming", "active", "completed"]


TOURNAMENTS = DomainSpec(
    name="tournaments",
    label="tournaments",
    items_key="tournaments",
    filter_fields=(
        "status",
        "organizer",
        "location",
        "dateFrom",
        "dateTo",
        "searchTerm",
        "entryFeeMin",
        "entryFeeMax",
        "participantsMin",
        "participantsMax",
    ),
    stats_model=TournamentStats,
    actions=ActionCatalog([ApproveTournaments, RejectTournaments, CancelTournaments, SetTournamentStatus]),
    statuses=frozenset(get_args(TournamentStatus)),
    reason_required_statuses=frozenset({"rejected", "cancelled"}),
    recipient_classes=frozenset({"participants", "confirmed", "organizer", "checked_in"}),
    batch_updates=False,
    notify_scope=NotifyScope.ENTITY,
    operations=(EntityOperation("report", "GET", "report", "Load report"),),
)
