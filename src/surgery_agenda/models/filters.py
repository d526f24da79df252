"""Filter inputs shared by calendar views and reports."""

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from surgery_agenda.constants import FILTER_ALL
from surgery_agenda.models.enums import AuthStatus, SurgeryStatus

AllValue = Literal["all"]


class StatusFilters(BaseModel):
    """Independent equality predicates; ``"all"`` disables a predicate.

    Accepts the query shape sent by the UI (``authStatus``, ``lifecycleStatus``,
    ``facilityId``, ``payerId``) as well as the field names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    auth_status: AuthStatus | AllValue = Field(default=FILTER_ALL, alias="authStatus")
    status: SurgeryStatus | AllValue = Field(default=FILTER_ALL, alias="lifecycleStatus")
    hospital_id: str = Field(default=FILTER_ALL, alias="facilityId")
    insurance_id: str = Field(default=FILTER_ALL, alias="payerId")

    def active_predicates(self) -> dict[str, Any]:
        """Return the enabled predicates keyed by the surgery attribute they test."""
        return {
            name: value
            for name, value in (
                ("auth_status", self.auth_status),
                ("status", self.status),
                ("hospital_id", self.hospital_id),
                ("insurance_id", self.insurance_id),
            )
            if value != FILTER_ALL
        }

    def without(self, predicate: str) -> "StatusFilters":
        """Return a copy with one predicate reset to ``"all"`` (removing a filter tag).

        ``predicate`` is a field name or its UI alias.

        Raises:
            ValueError: If ``predicate`` names no filter
        """
        fields = type(self).model_fields
        name = next((n for n, info in fields.items() if predicate in (n, info.alias)), None)
        if name is None:
            raise ValueError(f"Unknown filter: {predicate}")
        return self.model_copy(update={name: FILTER_ALL})

    @property
    def is_empty(self) -> bool:
        return not self.active_predicates()


class DateRange(BaseModel):
    """Inclusive calendar date range; either bound may be open."""

    model_config = ConfigDict(frozen=True)

    start: date | None = None
    end: date | None = None

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None
