"""Display labels for references that may no longer resolve.

A surgery can outlive the doctor, hospital or insurance plan it points to.
Lookups here never fail; they fall back to ``"N/A"``.
"""

from collections.abc import Iterable

import arrow

from surgery_agenda.constants import NOT_AVAILABLE_LABEL
from surgery_agenda.models.domain import CatalogEntry, Doctor, Surgery


def name_of(entries: Iterable[CatalogEntry | Doctor], entry_id: str | None, fallback: str = NOT_AVAILABLE_LABEL) -> str:
    if entry_id is None:
        return fallback
    return next((entry.name for entry in entries if entry.id == entry_id), fallback)


def team_names(surgery: Surgery, doctors: Iterable[Doctor]) -> list[str]:
    """Names of the participants (main surgeon excluded) that still resolve."""
    directory = {d.id: d.name for d in doctors}
    return [directory[pid] for pid in surgery.participant_ids if pid in directory]


def format_local(surgery: Surgery, tz: str, fmt: str = "DD/MM/YYYY HH:mm") -> str:
    if surgery.scheduled_at is None:
        return NOT_AVAILABLE_LABEL
    return arrow.get(surgery.scheduled_at).to(tz).format(fmt)


def surgery_tooltip(
    surgery: Surgery,
    doctors: Iterable[Doctor],
    hospitals: Iterable[CatalogEntry],
    insurance_plans: Iterable[CatalogEntry],
    tz: str = "UTC",
) -> str:
    """Multi-line summary shown when hovering a surgery in the calendar."""
    doctors = list(doctors)
    lines = [
        f"Paciente: {surgery.patient_name}",
        f"Data: {format_local(surgery, tz)}",
        f"Hospital: {name_of(hospitals, surgery.hospital_id)}",
        f"Convênio: {name_of(insurance_plans, surgery.insurance_id)}",
        f"Cirurgião: {name_of(doctors, surgery.main_surgeon_id)}",
    ]
    participants = team_names(surgery, doctors)
    if participants:
        lines.append(f"Equipe: {', '.join(participants)}")
    lines.append(f"Status Cirurgia: {surgery.status}")
    lines.append(f"Status Autorização: {surgery.auth_status}")
    return "\n".join(lines)
