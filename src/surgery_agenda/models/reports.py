"""Report and dashboard result models."""

from pydantic import BaseModel, ConfigDict, Field

from surgery_agenda.models.domain import Surgery


class LabelValue(BaseModel):
    """One bar or slice of a chart."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: float


class ReportSummary(BaseModel):
    """Revenue and volume rollup for a filtered set of surgeries."""

    model_config = ConfigDict(frozen=True)

    total_revenue: float = 0.0
    revenue_by_participant: list[LabelValue] = Field(default_factory=list)
    count_by_facility: list[LabelValue] = Field(default_factory=list)
    total_count: int = 0
    completed_count: int = 0

    def revenue_dict(self) -> dict[str, float]:
        return {item.label: item.value for item in self.revenue_by_participant}

    def facility_dict(self) -> dict[str, int]:
        return {item.label: int(item.value) for item in self.count_by_facility}


class WorkflowProgress(BaseModel):
    """Progress of a surgery through Scheduled, Authorized, Completed and Post-op."""

    model_config = ConfigDict(frozen=True)

    surgery_id: str
    cancelled: bool = False
    completed_steps: tuple[str, ...] = ()
    active_step: str | None = None


class DashboardSummary(BaseModel):
    """Figures shown on the home dashboard."""

    model_config = ConfigDict(frozen=True)

    surgeries_today: list[Surgery] = Field(default_factory=list)
    pending_auth_count: int = 0
    month_revenue: float = 0.0
    workflows: list[WorkflowProgress] = Field(default_factory=list)
