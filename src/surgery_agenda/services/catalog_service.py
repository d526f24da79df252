"""Service for doctors, hospitals and insurance plans."""

import random

from loguru import logger

from surgery_agenda.exceptions import InvalidRecordError, StoreWriteError
from surgery_agenda.models.domain import Doctor, Hospital, InsurancePlan
from surgery_agenda.services.notifications import NotificationCenter
from surgery_agenda.store.collection import SurgeryCollection
from surgery_agenda.store.interface import SurgeryStore
from surgery_agenda.utils.id_generator import generate_record_id


def random_doctor_color() -> str:
    """Distinct calendar color for a new doctor (CSS hsl)."""
    return f"hsl({random.randint(0, 359)}, 70%, 50%)"


class CatalogService:
    """Catalog writes; the collection is updated once the store confirms."""

    def __init__(self, store: SurgeryStore, collection: SurgeryCollection, notifications: NotificationCenter | None = None):
        self.store = store
        self.collection = collection
        self.notifications = notifications if notifications is not None else NotificationCenter()

    def _failed(self, operation: str, error: StoreWriteError) -> None:
        logger.error(f"Service: {operation} failed: {error}")
        self.notifications.error(f"Erro ao salvar: {error.reason}")

    @staticmethod
    def _required_name(name: str, field: str = "name") -> str:
        cleaned = name.strip()
        if not cleaned:
            raise InvalidRecordError({field: "Name is required"})
        return cleaned

    # -- hospitals -------------------------------------------------------

    def add_hospital(self, name: str) -> Hospital | None:
        hospital = Hospital(id=generate_record_id("hsp_"), name=self._required_name(name))
        try:
            stored = self.store.save_hospital(hospital)
        except StoreWriteError as e:
            self._failed("add_hospital", e)
            return None
        self.collection.replace_catalog(hospitals=self.collection.hospitals + (stored,))
        self.notifications.success("Hospital adicionado!")
        return stored

    def remove_hospital(self, hospital_id: str) -> bool:
        """Remove a hospital; surgeries still referencing it keep the dangling id."""
        try:
            removed = self.store.delete_hospital(hospital_id)
        except StoreWriteError as e:
            self._failed("remove_hospital", e)
            return False
        if removed:
            self.collection.replace_catalog(hospitals=[h for h in self.collection.hospitals if h.id != hospital_id])
            self.notifications.success("Hospital removido!")
        return removed

    # -- insurance plans -------------------------------------------------

    def add_insurance_plan(self, name: str) -> InsurancePlan | None:
        plan = InsurancePlan(id=generate_record_id("ins_"), name=self._required_name(name))
        try:
            stored = self.store.save_insurance_plan(plan)
        except StoreWriteError as e:
            self._failed("add_insurance_plan", e)
            return None
        self.collection.replace_catalog(insurance_plans=self.collection.insurance_plans + (stored,))
        self.notifications.success("Convênio adicionado!")
        return stored

    def remove_insurance_plan(self, plan_id: str) -> bool:
        try:
            removed = self.store.delete_insurance_plan(plan_id)
        except StoreWriteError as e:
            self._failed("remove_insurance_plan", e)
            return False
        if removed:
            self.collection.replace_catalog(
                insurance_plans=[p for p in self.collection.insurance_plans if p.id != plan_id]
            )
            self.notifications.success("Convênio removido!")
        return removed

    # -- doctors ---------------------------------------------------------

    def _save_doctor(self, doctor: Doctor, operation: str, message: str) -> Doctor | None:
        try:
            stored = self.store.save_doctor(doctor)
        except StoreWriteError as e:
            self._failed(operation, e)
            return None
        others = [d for d in self.collection.doctors if d.id != stored.id]
        if len(others) == len(self.collection.doctors):
            self.collection.replace_catalog(doctors=[*others, stored])
        else:
            self.collection.replace_catalog(
                doctors=[stored if d.id == stored.id else d for d in self.collection.doctors]
            )
        self.notifications.success(message)
        return stored

    def add_doctor(self, name: str, email: str, is_admin: bool = False, color: str | None = None) -> Doctor | None:
        """Register a doctor; name and email are required.

        Raises:
            InvalidRecordError: If name or email is blank
        """
        errors = {}
        if not name.strip():
            errors["name"] = "Name is required"
        if not email.strip():
            errors["email"] = "Email is required"
        if errors:
            raise InvalidRecordError(errors)

        doctor = Doctor(
            id=generate_record_id("doc_"),
            name=name.strip(),
            email=email.strip(),
            color=color or random_doctor_color(),
            is_admin=is_admin,
        )
        logger.debug(f"Service: add_doctor {doctor.id}")
        return self._save_doctor(doctor, "add_doctor", "Usuário adicionado!")

    def update_doctor(
        self, doctor_id: str, name: str | None = None, email: str | None = None, is_admin: bool | None = None
    ) -> Doctor | None:
        current = self.collection.doctor(doctor_id)
        if current is None:
            logger.warning(f"Service: update_doctor - doctor not found: {doctor_id}")
            return None

        changes: dict = {}
        if name is not None:
            changes["name"] = self._required_name(name)
        if email is not None:
            if not email.strip():
                raise InvalidRecordError({"email": "Email is required"})
            changes["email"] = email.strip()
        if is_admin is not None:
            changes["is_admin"] = is_admin
        return self._save_doctor(current.model_copy(update=changes), "update_doctor", "Usuário atualizado!")

    def remove_doctor(self, doctor_id: str, acting_user_id: str | None = None) -> bool:
        """Remove a doctor; users cannot remove themselves."""
        if acting_user_id is not None and doctor_id == acting_user_id:
            logger.warning(f"Service: remove_doctor - refusing self removal of {doctor_id}")
            self.notifications.error("Você não pode remover a si mesmo.")
            return False
        try:
            removed = self.store.delete_doctor(doctor_id)
        except StoreWriteError as e:
            self._failed("remove_doctor", e)
            return False
        if removed:
            self.collection.replace_catalog(doctors=[d for d in self.collection.doctors if d.id != doctor_id])
            self.notifications.success("Usuário removido!")
        return removed
