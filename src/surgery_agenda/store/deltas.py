"""Change-feed deltas for surgeries.

A store emits one delta per acknowledged change. They are folded into the
in-memory collection by ``surgery_agenda.store.collection.fold_delta``.
"""

from pydantic import BaseModel, ConfigDict

from surgery_agenda.models.domain import Surgery


class SurgeryInserted(BaseModel):
    """A surgery was created."""

    model_config = ConfigDict(frozen=True)

    surgery: Surgery


class SurgeryUpdated(BaseModel):
    """A surgery was replaced by a new version."""

    model_config = ConfigDict(frozen=True)

    surgery: Surgery


class SurgeryDeleted(BaseModel):
    """A surgery was removed."""

    model_config = ConfigDict(frozen=True)

    surgery_id: str


SurgeryDelta = SurgeryInserted | SurgeryUpdated | SurgeryDeleted

DELTA_TYPES: tuple[type[BaseModel], ...] = (SurgeryInserted, SurgeryUpdated, SurgeryDeleted)
