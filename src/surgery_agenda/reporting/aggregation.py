"""Revenue and volume rollups for the reports view."""

from collections.abc import Iterable

import arrow

from surgery_agenda.constants import UNKNOWN_LABEL
from surgery_agenda.models.domain import Doctor, Hospital, Surgery
from surgery_agenda.models.enums import SurgeryStatus
from surgery_agenda.models.filters import DateRange
from surgery_agenda.models.reports import LabelValue, ReportSummary
from surgery_agenda.scheduling.filtering import involves_doctor


def within_range(surgery: Surgery, date_range: DateRange | None, tz: str = "UTC") -> bool:
    """Inclusive range test on the surgery timestamp.

    The lower bound starts at local midnight of ``start`` and the upper bound
    runs to the last microsecond of ``end``. With any bound set, surgeries
    without a timestamp are excluded.
    """
    if date_range is None or date_range.is_open:
        return True
    if surgery.scheduled_at is None:
        return False

    moment = arrow.get(surgery.scheduled_at)
    if date_range.start is not None:
        lower = arrow.Arrow.fromdate(date_range.start, tzinfo=tz)
        if moment < lower:
            return False
    if date_range.end is not None:
        upper = arrow.Arrow.fromdate(date_range.end, tzinfo=tz).replace(hour=23, minute=59, second=59, microsecond=999999)
        if moment > upper:
            return False
    return True


def filter_for_report(
    surgeries: Iterable[Surgery],
    date_range: DateRange | None = None,
    doctor_id: str | None = None,
    tz: str = "UTC",
) -> list[Surgery]:
    return [s for s in surgeries if within_range(s, date_range, tz) and involves_doctor(s, doctor_id)]


def ranked(totals: dict[str, float]) -> list[LabelValue]:
    """Sort by value descending; ties keep first-encountered order."""
    ordered = sorted(totals.items(), key=lambda item: -item[1])
    return [LabelValue(label=label, value=value) for label, value in ordered]


def _labeler(directory: dict[str, str] | None):
    if directory is None:
        return lambda key: key if key is not None else UNKNOWN_LABEL
    return lambda key: directory.get(key, UNKNOWN_LABEL)


def aggregate(
    surgeries: Iterable[Surgery],
    date_range: DateRange | None = None,
    doctor_id: str | None = None,
    doctors: Iterable[Doctor] | None = None,
    hospitals: Iterable[Hospital] | None = None,
    tz: str = "UTC",
) -> ReportSummary:
    """Compute the report rollup for the filtered surgeries.

    Args:
        surgeries: All known surgeries
        date_range: Optional inclusive date bounds
        doctor_id: Keep surgeries this doctor leads or joins (None = all)
        doctors: Directory used to label revenue; ids it does not know go to
            ``"Unknown"``. Without a directory labels are the raw ids.
        hospitals: Directory used to label facility counts, same rules
        tz: Display timezone for the date bounds

    Returns:
        ReportSummary. Revenue only counts Completed surgeries; facility counts
        include every filtered surgery.
    """
    selected = filter_for_report(surgeries, date_range, doctor_id, tz)
    completed = [s for s in selected if s.status == SurgeryStatus.COMPLETED]

    doctor_label = _labeler({d.id: d.name for d in doctors} if doctors is not None else None)
    hospital_label = _labeler({h.id: h.name for h in hospitals} if hospitals is not None else None)

    revenue: dict[str, float] = {}
    for surgery in completed:
        for participant_id, amount in surgery.fees.items():
            label = doctor_label(participant_id)
            revenue[label] = revenue.get(label, 0.0) + (amount or 0.0)

    facility_counts: dict[str, float] = {}
    for surgery in selected:
        label = hospital_label(surgery.hospital_id)
        facility_counts[label] = facility_counts.get(label, 0) + 1

    return ReportSummary(
        total_revenue=sum(s.total_fees for s in completed),
        revenue_by_participant=ranked(revenue),
        count_by_facility=ranked(facility_counts),
        total_count=len(selected),
        completed_count=len(completed),
    )

