"""Service for surgery scheduling operations.

The service owns the in-memory ``SurgeryCollection`` and is the only place
that writes surgeries. Every write follows the same path: validate, send to
the store (retrying transient failures), then mirror the acknowledged record
locally. A failed write leaves the collection untouched and raises an error
notification instead.
"""

from datetime import date, datetime
from typing import BinaryIO

import arrow
from loguru import logger
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_exponential

from surgery_agenda.constants import ATTACHMENT_SLOTS, DEFAULT_SURGERY_HOUR
from surgery_agenda.event_bus import Subscription
from surgery_agenda.exceptions import ResourceNotFoundError, StoreUnavailableError, StoreWriteError, SurgeryValidationError
from surgery_agenda.models.domain import Surgery
from surgery_agenda.models.enums import AuthStatus, SurgeryStatus, ViewMode
from surgery_agenda.models.filters import DateRange, StatusFilters
from surgery_agenda.models.reports import DashboardSummary, ReportSummary
from surgery_agenda.reporting.aggregation import aggregate, filter_for_report
from surgery_agenda.reporting.dashboard import dashboard_summary
from surgery_agenda.reporting.export import export_csv
from surgery_agenda.scheduling.bucketing import GridCell, bucket_grid, surgeries_on
from surgery_agenda.scheduling.filtering import filter_surgeries, search_by_patient
from surgery_agenda.scheduling.grid import build_grid, today_in
from surgery_agenda.scheduling.reschedule import apply_drop
from surgery_agenda.services.notifications import NotificationCenter
from surgery_agenda.services.validation import validate_surgery
from surgery_agenda.settings import Settings, get_settings
from surgery_agenda.store.collection import SurgeryCollection
from surgery_agenda.store.interface import AttachmentStore, StoreSnapshot, SurgeryStore
from surgery_agenda.utils.id_generator import generate_record_id


class SchedulingService:
    """Surgery reads and writes on top of a ``SurgeryStore``."""

    def __init__(
        self,
        store: SurgeryStore,
        attachments: AttachmentStore | None = None,
        settings: Settings | None = None,
        collection: SurgeryCollection | None = None,
        notifications: NotificationCenter | None = None,
    ):
        self.store = store
        self.attachments = attachments
        self.settings = settings or get_settings()
        self.collection = collection if collection is not None else SurgeryCollection()
        self.notifications = notifications if notifications is not None else NotificationCenter(self.settings.notification_ttl_seconds)
        self._subscription: Subscription | None = None

    @property
    def tz(self) -> str:
        return self.settings.display_timezone

    # -- synchronization -------------------------------------------------

    def load(self) -> StoreSnapshot:
        """Full reload of the collection from the store."""
        snapshot = self.store.load_snapshot()
        self.collection.replace_all(snapshot)
        logger.debug(f"Service: load - {len(snapshot.surgeries)} surgeries")
        return snapshot

    def start_sync(self) -> Subscription:
        """Fold every store delta into the collection until ``stop_sync``."""
        if self._subscription is None or not self._subscription.active:
            self._subscription = self.store.subscribe(self.collection.apply)
            logger.debug("Service: change feed subscribed")
        return self._subscription

    def stop_sync(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    # -- writes ----------------------------------------------------------

    def _write(self, surgery: Surgery) -> Surgery:
        retryer = Retrying(
            stop=stop_after_attempt(self.settings.write_retry_attempts),
            wait=wait_exponential(multiplier=0.05, max=1),
            retry=retry_if_exception_type(StoreUnavailableError),
            reraise=True,
            before_sleep=before_sleep_log(logger, "DEBUG"),
        )
        return retryer(self.store.save_surgery, surgery)

    def save_surgery(self, surgery: Surgery, success_message: str | None = None) -> Surgery | None:
        """Create or replace a surgery (full form save).

        Args:
            surgery: The complete record to store
            success_message: Notification text on success (a default is used if omitted)

        Returns:
            The stored surgery, or None if the store failed

        Raises:
            SurgeryValidationError: If the record is incomplete; nothing is written
        """
        validate_surgery(surgery)
        is_new = self.collection.get(surgery.id) is None
        logger.debug(f"Service: save_surgery {surgery.id} (new={is_new})")

        try:
            stored = self._write(surgery)
        except StoreWriteError as e:
            logger.error(f"Service: save_surgery - failed to store surgery {surgery.id}: {e}")
            self.notifications.error(f"Erro ao salvar cirurgia: {e.reason}")
            return None

        self.collection.acknowledge(stored)
        if success_message is None:
            success_message = "Cirurgia salva com sucesso!" if is_new else "Cirurgia atualizada com sucesso!"
        self.notifications.success(success_message)
        return stored

    def new_surgery(self, day: date, main_surgeon_id: str | None = None) -> Surgery:
        """Unsaved draft for a surgery booked on ``day`` at the default hour.

        Defaults: first known doctor as main surgeon, first hospital and
        insurance plan, authorization Pending, lifecycle Scheduled.
        """
        if main_surgeon_id is None:
            main_surgeon_id = self.collection.doctors[0].id if self.collection.doctors else ""
        hospitals, plans = self.collection.hospitals, self.collection.insurance_plans
        start = arrow.Arrow(day.year, day.month, day.day, DEFAULT_SURGERY_HOUR, tzinfo=self.tz)
        return Surgery(
            id=generate_record_id("srg_"),
            main_surgeon_id=main_surgeon_id,
            scheduled_at=start.to("UTC").datetime,
            hospital_id=hospitals[0].id if hospitals else None,
            insurance_id=plans[0].id if plans else None,
            auth_status=AuthStatus.PENDING,
            status=SurgeryStatus.SCHEDULED,
        )

    def request_surgery(
        self,
        patient_name: str,
        main_surgeon_id: str,
        participant_ids: list[str] | None = None,
        hospital_id: str | None = None,
        insurance_id: str | None = None,
        scheduled_at: datetime | None = None,
        notes: str = "",
    ) -> Surgery | None:
        """Register a surgery request; the date may still be unknown."""
        surgery = Surgery(
            id=generate_record_id("srg_"),
            patient_name=patient_name,
            main_surgeon_id=main_surgeon_id,
            participant_ids=participant_ids or [],
            hospital_id=hospital_id,
            insurance_id=insurance_id,
            scheduled_at=scheduled_at,
            notes=notes,
            status=SurgeryStatus.REQUESTED,
            auth_status=AuthStatus.PENDING,
        )
        return self.save_surgery(surgery, success_message="Solicitação de cirurgia registrada!")

    def _transition(self, surgery_id: str, message: str, **changes) -> Surgery | None:
        surgery = self.collection.get(surgery_id)
        if surgery is None:
            logger.warning(f"Service: transition ignored - surgery not found: {surgery_id}")
            return None
        updated = surgery.with_changes(**changes)
        return self.save_surgery(updated, success_message=message.format(patient=updated.patient_name))

    def authorize(self, surgery_id: str) -> Surgery | None:
        return self._transition(surgery_id, "Cirurgia de {patient} liberada.", auth_status=AuthStatus.APPROVED)

    def deny(self, surgery_id: str) -> Surgery | None:
        return self._transition(surgery_id, "Cirurgia de {patient} recusada.", auth_status=AuthStatus.DENIED)

    def schedule(self, surgery_id: str, when: datetime) -> Surgery | None:
        return self._transition(
            surgery_id,
            "Cirurgia de {patient} agendada.",
            scheduled_at=when,
            status=SurgeryStatus.SCHEDULED,
        )

    def mark_completed(self, surgery_id: str) -> Surgery | None:
        return self._transition(
            surgery_id,
            "Status da cirurgia de {patient} atualizado para Realizada.",
            status=SurgeryStatus.COMPLETED,
        )

    def cancel(self, surgery_id: str) -> Surgery | None:
        return self._transition(
            surgery_id,
            "Status da cirurgia de {patient} atualizado para Cancelada.",
            status=SurgeryStatus.CANCELLED,
        )

    def reschedule_by_drag(self, surgery_id: str, target_date: date) -> Surgery | None:
        """Move a surgery to another day keeping its clock time.

        Unknown ids and surgeries without a time are ignored (None, no write).
        """
        moved = apply_drop(self.collection.surgeries, surgery_id, target_date, self.tz)
        if moved is None:
            return None
        if moved == self.collection.get(surgery_id):
            logger.debug(f"Service: reschedule_by_drag - {surgery_id} already on {target_date}")
            return moved
        return self.save_surgery(moved, success_message=f"Cirurgia de {moved.patient_name} reagendada.")

    def attach(self, surgery_id: str, slot: str, filename: str, data: bytes | BinaryIO, owner_id: str) -> Surgery | None:
        """Upload a file and store its reference in ``slot`` of the surgery.

        Args:
            surgery_id: Surgery receiving the attachment
            slot: ``"pre_op_attachment"`` or ``"post_op_attachment"``
            filename: Original file name
            data: File content
            owner_id: Uploading user, first segment of the stored path
        """
        if slot not in ATTACHMENT_SLOTS:
            raise SurgeryValidationError({slot: f"Unknown attachment slot, expected one of {', '.join(ATTACHMENT_SLOTS)}"})
        if self.attachments is None:
            raise RuntimeError("No attachment store configured")

        surgery = self.collection.get(surgery_id)
        if surgery is None:
            logger.warning(f"Service: attach ignored - surgery not found: {surgery_id}")
            return None

        try:
            path = self.attachments.upload(owner_id, filename, data)
        except StoreWriteError as e:
            logger.error(f"Service: attach - upload failed for surgery {surgery_id}: {e}")
            self.notifications.error(f"Erro ao enviar arquivo: {e.reason}")
            return None

        return self.save_surgery(surgery.with_changes(**{slot: path}), success_message="Arquivo anexado com sucesso!")

    def detach(self, surgery_id: str, slot: str) -> Surgery | None:
        """Clear an attachment reference; the stored blob is left in place."""
        if slot not in ATTACHMENT_SLOTS:
            raise SurgeryValidationError({slot: f"Unknown attachment slot, expected one of {', '.join(ATTACHMENT_SLOTS)}"})
        return self._transition(surgery_id, "Anexo removido.", **{slot: None})

    # -- reads -----------------------------------------------------------

    def get_surgery(self, surgery_id: str) -> Surgery:
        """Look up a surgery in the collection.

        Raises:
            ResourceNotFoundError: If no surgery has this id
        """
        surgery = self.collection.get(surgery_id)
        if surgery is None:
            raise ResourceNotFoundError("Surgery", surgery_id)
        return surgery

    def calendar(
        self,
        reference: date,
        mode: ViewMode | str = ViewMode.MONTH,
        doctor_id: str | None = None,
        filters: StatusFilters | None = None,
        today: date | None = None,
    ) -> list[GridCell]:
        """Grid cells for the view with the filtered surgeries of each day."""
        surgeries = filter_surgeries(self.collection.surgeries, doctor_id, filters)
        return bucket_grid(build_grid(reference, mode), surgeries, self.tz, today or today_in(self.tz))

    def day_detail(self, day: date, doctor_id: str | None = None, filters: StatusFilters | None = None) -> list[Surgery]:
        return surgeries_on(filter_surgeries(self.collection.surgeries, doctor_id, filters), day, self.tz)

    def search(self, query: str) -> list[Surgery]:
        return search_by_patient(self.collection.surgeries, query)

    def report(self, date_range: DateRange | None = None, doctor_id: str | None = None) -> ReportSummary:
        return aggregate(
            self.collection.surgeries,
            date_range=date_range,
            doctor_id=doctor_id,
            doctors=self.collection.doctors,
            hospitals=self.collection.hospitals,
            tz=self.tz,
        )

    def dashboard(self, today: date | None = None) -> DashboardSummary:
        return dashboard_summary(self.collection.surgeries, today or today_in(self.tz), self.tz)

    def export_csv(self, date_range: DateRange | None = None, doctor_id: str | None = None) -> str:
        selected = filter_for_report(self.collection.surgeries, date_range, doctor_id, self.tz)
        return export_csv(
            selected,
            self.collection.doctors,
            self.collection.hospitals,
            self.collection.insurance_plans,
            tz=self.tz,
        )
