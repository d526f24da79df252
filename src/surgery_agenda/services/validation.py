"""Checks run before a surgery is sent to the store."""

from surgery_agenda.exceptions import SurgeryValidationError
from surgery_agenda.models.domain import Surgery
from surgery_agenda.models.enums import SurgeryStatus


def validate_surgery(surgery: Surgery) -> Surgery:
    """Raise ``SurgeryValidationError`` listing every problem; return the surgery otherwise."""
    errors: dict[str, str] = {}

    if not surgery.patient_name.strip():
        errors["patient_name"] = "Patient name is required"
    if not surgery.main_surgeon_id:
        errors["main_surgeon_id"] = "Main surgeon is required"
    if surgery.status == SurgeryStatus.SCHEDULED and surgery.scheduled_at is None:
        errors["scheduled_at"] = "Date and time are required for a scheduled surgery"

    negative = [name for name, amount in surgery.fees.items() if amount < 0]
    if negative:
        errors["fees"] = f"Fees cannot be negative: {', '.join(negative)}"

    if errors:
        raise SurgeryValidationError(errors)
    return surgery
