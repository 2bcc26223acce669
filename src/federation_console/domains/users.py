from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..engine.actions import ActionCatalog, BulkActionPayload, EntityOperation
from ..engine.domain import DomainSpec, NotifyScope
from ..models import StatsModel


class UserStats(StatsModel):
    total_users: int = Field(default=0, alias="totalUsers")
    active_users: int = Field(default=0, alias="activeUsers")
    inactive_users: int = Field(default=0, alias="inactiveUsers")
    suspended_users: int = Field(default=0, alias="suspendedUsers")
    verified_users: int = Field(default=0, alias="verifiedUsers")
    premium_users: int = Field(default=0, alias="premiumUsers")
    player_count: int = Field(default=0, alias="playerCount")
    coach_count: int = Field(default=0, alias="coachCount")
    club_count: int = Field(default=0, alias="clubCount")
    partner_count: int = Field(default=0, alias="partnerCount")
    state_count: int = Field(default=0, alias="stateCount")


class SetUserStatus(BulkActionPayload):
    label = "Change status"

    action: Literal["status"] = "status"
    status: Literal["active", "inactive", "suspended"]
    reason: str | None = None

    @model_validator(mode="after")
    def _suspension_needs_reason(self) -> "SetUserStatus":
        if self.status == "suspended" and not (self.reason or "").strip():
            raise ValueError("A reason is required to suspend users")
        return self


class SetUserVerification(BulkActionPayload):
    label = "Verify"

    action: Literal["verification"] = "verification"
    verified: bool = True


class SetUserPremium(BulkActionPayload):
    label = "Change premium"

    action: Literal["premium"] = "premium"
    premium: bool = True
    duration: int | None = Field(default=None, ge=1, description="Months of premium granted")


class VerificationBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    verified: bool


class PremiumBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    premium: bool = True
    duration: int | None = Field(default=None, ge=1)


USERS = DomainSpec(
    name="users",
    label="users",
    items_key="users",
    filter_fields=("role", "status", "state", "affiliation", "searchTerm", "dateFrom", "dateTo"),
    stats_model=UserStats,
    actions=ActionCatalog([SetUserStatus, SetUserVerification, SetUserPremium]),
    statuses=frozenset({"active", "inactive", "suspended"}),
    reason_required_statuses=frozenset({"suspended"}),
    ids_key="userIds",
    notify_scope=NotifyScope.SELECTION,
    operations=(
        EntityOperation(
            "verification", "PUT", "verification", "Update verification", body_model=VerificationBody, mutates=True
        ),
        EntityOperation("premium", "PUT", "premium", "Update premium", body_model=PremiumBody, mutates=True),
        EntityOperation("reset_password", "POST", "reset-password", "Reset password"),
    ),
)
