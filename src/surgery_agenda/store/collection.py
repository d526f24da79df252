"""In-memory mirror of the backing store.

The surgery list is only ever changed through ``fold_delta``: full reloads
replace it wholesale, change-feed deltas and acknowledged local writes are
folded one at a time in arrival order. When a local write and the feed report
the same surgery, whichever arrives last wins.
"""

from collections.abc import Iterable

from loguru import logger

from surgery_agenda.models.domain import Doctor, Hospital, InsurancePlan, Surgery
from surgery_agenda.store.deltas import SurgeryDelta, SurgeryDeleted, SurgeryInserted, SurgeryUpdated
from surgery_agenda.store.interface import StoreSnapshot


def _replace_or_append(surgeries: tuple[Surgery, ...], surgery: Surgery) -> tuple[Surgery, ...]:
    for index, existing in enumerate(surgeries):
        if existing.id == surgery.id:
            return surgeries[:index] + (surgery,) + surgeries[index + 1 :]
    return surgeries + (surgery,)


def fold_delta(surgeries: tuple[Surgery, ...], delta: SurgeryDelta) -> tuple[Surgery, ...]:
    """Apply one delta and return the new surgery tuple.

    - insert: append when absent, otherwise replace (the feed may redeliver)
    - update: replace by id, append when unknown
    - delete: remove by id, no-op when absent
    """
    match delta:
        case SurgeryInserted(surgery=surgery) | SurgeryUpdated(surgery=surgery):
            return _replace_or_append(surgeries, surgery)
        case SurgeryDeleted(surgery_id=surgery_id):
            return tuple(s for s in surgeries if s.id != surgery_id)
    raise TypeError(f"Unsupported delta: {type(delta).__name__}")


class SurgeryCollection:
    """The single in-memory copy of surgeries and catalog data."""

    def __init__(self, snapshot: StoreSnapshot | None = None) -> None:
        self._surgeries: tuple[Surgery, ...] = ()
        self._doctors: tuple[Doctor, ...] = ()
        self._hospitals: tuple[Hospital, ...] = ()
        self._insurance_plans: tuple[InsurancePlan, ...] = ()
        if snapshot is not None:
            self.replace_all(snapshot)

    @property
    def surgeries(self) -> tuple[Surgery, ...]:
        return self._surgeries

    @property
    def doctors(self) -> tuple[Doctor, ...]:
        return self._doctors

    @property
    def hospitals(self) -> tuple[Hospital, ...]:
        return self._hospitals

    @property
    def insurance_plans(self) -> tuple[InsurancePlan, ...]:
        return self._insurance_plans

    def __len__(self) -> int:
        return len(self._surgeries)

    def replace_all(self, snapshot: StoreSnapshot) -> None:
        """Full reload from a store read."""
        self._surgeries = tuple(snapshot.surgeries)
        self.replace_catalog(snapshot.doctors, snapshot.hospitals, snapshot.insurance_plans)
        logger.debug(f"Collection reloaded: {len(self._surgeries)} surgeries")

    def replace_catalog(
        self,
        doctors: Iterable[Doctor] | None = None,
        hospitals: Iterable[Hospital] | None = None,
        insurance_plans: Iterable[InsurancePlan] | None = None,
    ) -> None:
        if doctors is not None:
            self._doctors = tuple(doctors)
        if hospitals is not None:
            self._hospitals = tuple(hospitals)
        if insurance_plans is not None:
            self._insurance_plans = tuple(insurance_plans)

    def apply(self, delta: SurgeryDelta) -> None:
        """Fold a change-feed delta; usable directly as a subscription handler."""
        self._surgeries = fold_delta(self._surgeries, delta)
        logger.trace(f"Folded {type(delta).__name__}, {len(self._surgeries)} surgeries")

    def acknowledge(self, surgery: Surgery) -> None:
        """Mirror a write the store has confirmed."""
        self.apply(SurgeryUpdated(surgery=surgery))

    def get(self, surgery_id: str) -> Surgery | None:
        return next((s for s in self._surgeries if s.id == surgery_id), None)

    def doctor(self, doctor_id: str) -> Doctor | None:
        return next((d for d in self._doctors if d.id == doctor_id), None)

    def hospital(self, hospital_id: str) -> Hospital | None:
        return next((h for h in self._hospitals if h.id == hospital_id), None)

    def insurance_plan(self, plan_id: str) -> InsurancePlan | None:
        return next((p for p in self._insurance_plans if p.id == plan_id), None)
