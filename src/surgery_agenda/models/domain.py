"""Domain models for surgeries and the records they reference.

Surgeries reference doctors, hospitals and insurance plans by id only. All
models are immutable; use ``Surgery.with_changes`` to derive an updated copy so
that validation (and fee reconciliation) runs again.
"""

from datetime import datetime
from typing import Any

import arrow
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from surgery_agenda.models.enums import AuthStatus, SurgeryStatus


def _as_id(value: Any) -> Any:
    # Legacy data uses numeric doctor ids
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(int(value))
    return value


class CatalogEntry(BaseModel):
    """An (id, name) pair managed independently from surgeries."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _as_id(v)


class Hospital(CatalogEntry):
    """Facility where a surgery takes place."""


class InsurancePlan(CatalogEntry):
    """Payer of a surgery (insurance plan or private)."""


class Doctor(BaseModel):
    """Staff member eligible to lead or join a surgery and receive fees."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str = ""
    color: str = ""
    is_admin: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _as_id(v)


class Surgery(BaseModel):
    """A requested or scheduled surgical procedure.

    ``fees`` always holds exactly one entry per team member (main surgeon plus
    participants). Fees of removed members are dropped and new members start
    at zero.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    patient_name: str = ""
    main_surgeon_id: str
    participant_ids: tuple[str, ...] = ()
    scheduled_at: datetime | None = None  # aware, UTC
    hospital_id: str | None = None
    insurance_id: str | None = None
    auth_status: AuthStatus = AuthStatus.PENDING
    status: SurgeryStatus = SurgeryStatus.REQUESTED
    fees: dict[str, float] = Field(default_factory=dict)
    material_cost: float = 0.0
    assistant_cost: float = 0.0
    scrub_cost: float = 0.0
    anesthesia_cost: float = 0.0
    facility_cost: float = 0.0
    notes: str = ""
    pre_op_attachment: str | None = None
    post_op_attachment: str | None = None

    @model_validator(mode="before")
    @classmethod
    def reconcile_team(cls, data: Any) -> Any:
        """Normalize team ids and make ``fees`` match the team exactly."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        main = _as_id(data.get("main_surgeon_id"))
        if main is not None:
            data["main_surgeon_id"] = main

        participants: list[str] = []
        for raw in data.get("participant_ids") or ():
            pid = _as_id(raw)
            if pid != main and pid not in participants:
                participants.append(pid)
        data["participant_ids"] = tuple(participants)

        old_fees = {str(_as_id(k)): v for k, v in (data.get("fees") or {}).items()}
        team = ([main] if main is not None else []) + participants
        data["fees"] = {member: float(old_fees.get(member) or 0.0) for member in team}
        return data

    @field_validator("scheduled_at", mode="before")
    @classmethod
    def normalize_scheduled_at(cls, v: Any) -> Any:
        """Parse ISO strings and datetimes into aware UTC; naive input is UTC."""
        if v is None or v == "":
            return None
        if isinstance(v, str | datetime):
            return arrow.get(v).to("UTC").datetime
        return v

    @field_validator("material_cost", "assistant_cost", "scrub_cost", "anesthesia_cost", "facility_cost", mode="before")
    @classmethod
    def default_cost(cls, v: Any) -> Any:
        return 0.0 if v in (None, "") else v

    @field_serializer("scheduled_at", when_used="json")
    def serialize_scheduled_at(self, v: datetime | None) -> str | None:
        if v is None:
            return None
        return arrow.get(v).to("UTC").isoformat().replace("+00:00", "Z")

    @property
    def team_ids(self) -> tuple[str, ...]:
        return (self.main_surgeon_id, *self.participant_ids)

    @property
    def is_scheduled(self) -> bool:
        return self.scheduled_at is not None

    @property
    def total_fees(self) -> float:
        return sum(self.fees.values())

    @property
    def auxiliary_costs(self) -> float:
        return self.material_cost + self.assistant_cost + self.scrub_cost + self.anesthesia_cost + self.facility_cost

    @property
    def total_cost(self) -> float:
        return self.total_fees + self.auxiliary_costs

    def involves(self, doctor_id: str) -> bool:
        """Whether the doctor leads or participates in this surgery."""
        return doctor_id == self.main_surgeon_id or doctor_id in self.participant_ids

    def with_changes(self, **updates: Any) -> "Surgery":
        """Return a revalidated copy with ``updates`` applied."""
        data = self.model_dump()
        data.update(updates)
        return type(self).model_validate(data)

    def with_team(self, main_surgeon_id: str | None = None, participant_ids: list[str] | None = None) -> "Surgery":
        """Return a copy with a new team; fees are reconciled to the new membership."""
        updates: dict[str, Any] = {}
        if main_surgeon_id is not None:
            updates["main_surgeon_id"] = main_surgeon_id
        if participant_ids is not None:
            updates["participant_ids"] = participant_ids
        return self.with_changes(**updates)
