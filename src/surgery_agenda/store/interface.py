"""Capabilities the engine needs from its persistence environment.

Any backend (hosted database with a change feed and a blob store, a SQL
database, an in-memory fake) satisfies the engine by implementing these two
interfaces.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, BinaryIO

from pydantic import BaseModel, ConfigDict, Field

from surgery_agenda.event_bus import Subscription
from surgery_agenda.models.domain import Doctor, Hospital, InsurancePlan, Surgery
from surgery_agenda.store.deltas import SurgeryDelta

DeltaHandler = Callable[[SurgeryDelta], Any]


class StoreSnapshot(BaseModel):
    """Full current state returned by a read."""

    model_config = ConfigDict(frozen=True)

    surgeries: tuple[Surgery, ...] = ()
    doctors: tuple[Doctor, ...] = ()
    hospitals: tuple[Hospital, ...] = ()
    insurance_plans: tuple[InsurancePlan, ...] = ()
    loaded_at: str | None = Field(default=None, description="ISO 8601 UTC time of the read")


class SurgeryStore(ABC):
    """Read, write and subscribe operations on the backing store.

    Writes raise ``StoreWriteError`` (or ``StoreUnavailableError`` for
    transient failures that may be retried) and must not emit a delta when
    they fail.
    """

    @abstractmethod
    def load_snapshot(self) -> StoreSnapshot:
        """Return every surgery, doctor, hospital and insurance plan."""

    @abstractmethod
    def save_surgery(self, surgery: Surgery) -> Surgery:
        """Create or replace the surgery keyed by ``surgery.id``; return the stored version."""

    @abstractmethod
    def subscribe(self, handler: DeltaHandler) -> Subscription:
        """Deliver every later surgery delta to ``handler`` until the handle is closed."""

    @abstractmethod
    def save_doctor(self, doctor: Doctor) -> Doctor: ...

    @abstractmethod
    def delete_doctor(self, doctor_id: str) -> bool: ...

    @abstractmethod
    def save_hospital(self, hospital: Hospital) -> Hospital: ...

    @abstractmethod
    def delete_hospital(self, hospital_id: str) -> bool: ...

    @abstractmethod
    def save_insurance_plan(self, plan: InsurancePlan) -> InsurancePlan: ...

    @abstractmethod
    def delete_insurance_plan(self, plan_id: str) -> bool: ...


class AttachmentStore(ABC):
    """Blob storage for surgery attachments."""

    @abstractmethod
    def upload(self, owner_id: str, filename: str, data: bytes | BinaryIO) -> str:
        """Store the blob and return its stable reference path."""
