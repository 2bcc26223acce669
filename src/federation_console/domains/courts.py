from __future__ import annotations

from typing import Literal

from pydantic import Field

from ..engine.actions import ActionCatalog, BulkActionPayload, EntityOperation, ReasonText
from ..engine.domain import DomainSpec
from ..models import StatsModel


class CourtStats(StatsModel):
    total_courts: int = Field(default=0, alias="totalCourts")
    active_courts: int = Field(default=0, alias="activeCourts")
    available_courts: int = Field(default=0, alias="availableCourts")
    occupied_courts: int = Field(default=0, alias="occupiedCourts")
    maintenance_courts: int = Field(default=0, alias="maintenanceCourts")
    total_reservations: int = Field(default=0, alias="totalReservations")
    total_revenue: float = Field(default=0, alias="totalRevenue")
    average_utilization: float = Field(default=0, alias="averageUtilization")
    top_performing_court: str = Field(default="", alias="topPerformingCourt")
    pending_approvals: int = Field(default=0, alias="pendingApprovals")


class ApproveCourts(BulkActionPayload):
    label = "Approve"

    action: Literal["approve"] = "approve"


class RejectCourts(BulkActionPayload):
    label = "Reject"

    action: Literal["reject"] = "reject"
    reason: ReasonText


class ScheduleMaintenance(BulkActionPayload):
    label = "Schedule maintenance"
    target_status = "maintenance"

    action: Literal["maintenance"] = "maintenance"
    reason: str | None = None


class ActivateCourts(BulkActionPayload):
    label = "Activate"
    target_status = "available"

    action: Literal["activate"] = "activate"


COURTS = DomainSpec(
    name="courts",
    label="courts",
    items_key="courts",
    filter_fields=(
        "location",
        "owner",
        "status",
        "surface",
        "lighting",
        "indoor",
        "searchTerm",
        "minRate",
        "maxRate",
    ),
    stats_model=CourtStats,
    actions=ActionCatalog([ApproveCourts, RejectCourts, ScheduleMaintenance, ActivateCourts]),
    statuses=frozenset({"available", "occupied", "maintenance", "pending", "approved", "rejected"}),
    reason_required_statuses=frozenset({"rejected"}),
    batch_updates=False,
    operations=(EntityOperation("utilization", "GET", "utilization", "Load utilization"),),
)
