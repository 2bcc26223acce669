from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..engine.actions import ActionCatalog, BulkActionPayload, EntityOperation, ReasonText
from ..engine.domain import DomainSpec, NotifyScope
from ..models import StatsModel


class MicrositeStats(StatsModel):
    total_microsites: int = Field(default=0, alias="totalMicrosites")
    active_microsites: int = Field(default=0, alias="activeMicrosites")
    inactive_microsites: int = Field(default=0, alias="inactiveMicrosites")
    pending_approval_microsites: int = Field(default=0, alias="pendingApprovalMicrosites")
    club_microsites: int = Field(default=0, alias="clubMicrosites")
    partner_microsites: int = Field(default=0, alias="partnerMicrosites")
    state_microsites: int = Field(default=0, alias="stateMicrosites")
    average_content_score: float = Field(default=0, alias="averageContentScore")
    total_page_views: int = Field(default=0, alias="totalPageViews")
    average_monthly_visitors: float = Field(default=0, alias="averageMonthlyVisitors")


class ApproveMicrosites(BulkActionPayload):
    label = "Approve"

    action: Literal["approve"] = "approve"


class RejectMicrosites(BulkActionPayload):
    label = "Reject"

    action: Literal["reject"] = "reject"
    reason: ReasonText


class SuspendMicrosites(BulkActionPayload):
    label = "Suspend"

    action: Literal["suspend"] = "suspend"
    reason: ReasonText


class ActivateMicrosites(BulkActionPayload):
    label = "Activate"
    target_status = "active"

    action: Literal["activate"] = "activate"


class AnalyticsQuery(BaseModel):
    model_config = ConfigDict(extra="forbid")

    period: Literal["7", "30", "90"] = "30"


MICROSITES = DomainSpec(
    name="microsites",
    label="microsites",
    items_key="microsites",
    filter_fields=("type", "status", "owner", "searchTerm", "dateFrom", "dateTo", "visibilityStatus", "contentStatus"),
    stats_model=MicrositeStats,
    actions=ActionCatalog([ApproveMicrosites, RejectMicrosites, SuspendMicrosites, ActivateMicrosites]),
    statuses=frozenset({"active", "inactive", "suspended", "pending", "approved", "rejected"}),
    reason_required_statuses=frozenset({"rejected", "suspended"}),
    recipient_classes=frozenset({"owner", "visitors", "subscribers"}),
    batch_updates=False,
    notify_scope=NotifyScope.ENTITY,
    operations=(
        EntityOperation("report", "GET", "report", "Load report"),
        EntityOperation("analytics", "GET", "analytics", "Load analytics", query_model=AnalyticsQuery),
        EntityOperation("audit", "POST", "audit", "Run audit"),
    ),
)
