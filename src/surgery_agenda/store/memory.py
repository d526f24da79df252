"""In-memory store used for development and tests."""

import arrow
from loguru import logger

from surgery_agenda.event_bus import EventBus, Subscription
from surgery_agenda.exceptions import StoreUnavailableError, StoreWriteError
from surgery_agenda.models.domain import Doctor, Hospital, InsurancePlan, Surgery
from surgery_agenda.store.deltas import DELTA_TYPES, SurgeryDeleted, SurgeryInserted, SurgeryUpdated
from surgery_agenda.store.interface import DeltaHandler, StoreSnapshot, SurgeryStore


class InMemorySurgeryStore(SurgeryStore):
    """Dictionary-backed store with its own change feed.

    ``fail_next_writes`` makes the next N writes raise, which lets callers
    exercise their failure handling. Transient failures raise
    ``StoreUnavailableError``; set ``transient=False`` for permanent ones.
    """

    def __init__(
        self,
        surgeries: list[Surgery] | None = None,
        doctors: list[Doctor] | None = None,
        hospitals: list[Hospital] | None = None,
        insurance_plans: list[InsurancePlan] | None = None,
        bus: EventBus | None = None,
    ) -> None:
        self._surgeries: dict[str, Surgery] = {s.id: s for s in surgeries or []}
        self._doctors: dict[str, Doctor] = {d.id: d for d in doctors or []}
        self._hospitals: dict[str, Hospital] = {h.id: h for h in hospitals or []}
        self._insurance_plans: dict[str, InsurancePlan] = {p.id: p for p in insurance_plans or []}
        self.bus = bus or EventBus()
        self.write_count = 0
        self._failures_left = 0
        self._transient = True

    def fail_next_writes(self, count: int = 1, transient: bool = True) -> None:
        self._failures_left = count
        self._transient = transient

    def _check_failure(self, operation: str) -> None:
        if self._failures_left > 0:
            self._failures_left -= 1
            if self._transient:
                raise StoreUnavailableError(operation, "store unavailable")
            raise StoreWriteError(operation, "rejected by store")

    def load_snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            surgeries=tuple(self._surgeries.values()),
            doctors=tuple(self._doctors.values()),
            hospitals=tuple(self._hospitals.values()),
            insurance_plans=tuple(self._insurance_plans.values()),
            loaded_at=arrow.utcnow().isoformat(),
        )

    def save_surgery(self, surgery: Surgery) -> Surgery:
        self._check_failure("save_surgery")
        is_new = surgery.id not in self._surgeries
        self._surgeries[surgery.id] = surgery
        self.write_count += 1
        logger.debug(f"InMemorySurgeryStore: saved surgery {surgery.id} (new={is_new})")
        self.bus.emit_sync(SurgeryInserted(surgery=surgery) if is_new else SurgeryUpdated(surgery=surgery))
        return surgery

    def delete_surgery(self, surgery_id: str) -> bool:
        """Remove a surgery; exposed for feeds driven by other clients."""
        self._check_failure("delete_surgery")
        if self._surgeries.pop(surgery_id, None) is None:
            return False
        self.bus.emit_sync(SurgeryDeleted(surgery_id=surgery_id))
        return True

    def subscribe(self, handler: DeltaHandler) -> Subscription:
        return self.bus.subscribe(DELTA_TYPES, handler)

    def save_doctor(self, doctor: Doctor) -> Doctor:
        self._check_failure("save_doctor")
        self._doctors[doctor.id] = doctor
        return doctor

    def delete_doctor(self, doctor_id: str) -> bool:
        self._check_failure("delete_doctor")
        return self._doctors.pop(doctor_id, None) is not None

    def save_hospital(self, hospital: Hospital) -> Hospital:
        self._check_failure("save_hospital")
        self._hospitals[hospital.id] = hospital
        return hospital

    def delete_hospital(self, hospital_id: str) -> bool:
        self._check_failure("delete_hospital")
        return self._hospitals.pop(hospital_id, None) is not None

    def save_insurance_plan(self, plan: InsurancePlan) -> InsurancePlan:
        self._check_failure("save_insurance_plan")
        self._insurance_plans[plan.id] = plan
        return plan

    def delete_insurance_plan(self, plan_id: str) -> bool:
        self._check_failure("delete_insurance_plan")
        return self._insurance_plans.pop(plan_id, None) is not None
