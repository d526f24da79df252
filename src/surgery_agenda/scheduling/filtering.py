"""Compound filtering of surgeries.

All predicates are conjunctive. The engine ignores dates entirely: excluding
unscheduled surgeries is the job of whatever buckets them into calendar days.
"""

from collections.abc import Iterable

from surgery_agenda.models.domain import Surgery
from surgery_agenda.models.filters import StatusFilters
from surgery_agenda.utils.text import fold_accents


def involves_doctor(surgery: Surgery, doctor_id: str | None) -> bool:
    """No doctor filter passes everything; otherwise primary or participant."""
    if doctor_id is None:
        return True
    return surgery.involves(str(doctor_id))


def matches_status(surgery: Surgery, filters: StatusFilters | None) -> bool:
    if filters is None:
        return True
    return all(getattr(surgery, attribute) == expected for attribute, expected in filters.active_predicates().items())


def matches(surgery: Surgery, doctor_id: str | None = None, filters: StatusFilters | None = None) -> bool:
    return involves_doctor(surgery, doctor_id) and matches_status(surgery, filters)


def filter_surgeries(
    surgeries: Iterable[Surgery],
    doctor_id: str | None = None,
    filters: StatusFilters | None = None,
) -> list[Surgery]:
    """Return the surgeries passing every active predicate, in input order.

    Args:
        surgeries: Surgeries to filter
        doctor_id: Keep only surgeries this doctor leads or joins (None = any)
        filters: Status, hospital and payer predicates (None = no constraint)

    Returns:
        New list; the input is not modified
    """
    return [s for s in surgeries if matches(s, doctor_id, filters)]


def search_by_patient(surgeries: Iterable[Surgery], query: str) -> list[Surgery]:
    """Accent and case insensitive substring search on the patient name."""
    needle = fold_accents(query).casefold().strip()
    if not needle:
        return list(surgeries)
    return [s for s in surgeries if needle in fold_accents(s.patient_name).casefold()]
