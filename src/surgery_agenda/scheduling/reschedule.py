"""Drag-and-drop rescheduling.

Dropping a surgery on another calendar day only changes its date; the clock
time it was booked for stays the same in the display timezone.
"""

from collections.abc import Iterable
from datetime import date, datetime

import arrow
from loguru import logger

from surgery_agenda.models.domain import Surgery


def reschedule(surgery: Surgery, target_date: date, tz: str = "UTC") -> datetime | None:
    """Compute the timestamp of ``surgery`` moved to ``target_date``.

    Args:
        surgery: Surgery being dragged; must already have a timestamp
        target_date: Calendar day of the drop target
        tz: Display timezone the calendar is rendered in

    Returns:
        New aware UTC timestamp, or None when the surgery has no timestamp to
        take the clock time from. Applying it twice with the same date gives
        the same result.
    """
    if surgery.scheduled_at is None:
        logger.debug(f"Reschedule skipped: surgery {surgery.id} has no scheduled time")
        return None

    local = arrow.get(surgery.scheduled_at).to(tz)
    moved = local.replace(year=target_date.year, month=target_date.month, day=target_date.day)
    return moved.to("UTC").datetime


def apply_drop(surgeries: Iterable[Surgery], surgery_id: str, target_date: date, tz: str = "UTC") -> Surgery | None:
    """Return the dropped surgery with its new timestamp.

    A lookup miss or an unscheduled surgery is a no-op: None is returned and
    nothing is raised.
    """
    surgery = next((s for s in surgeries if s.id == surgery_id), None)
    if surgery is None:
        logger.warning(f"Reschedule ignored: surgery {surgery_id} not found")
        return None

    new_timestamp = reschedule(surgery, target_date, tz)
    if new_timestamp is None:
        return None
    return surgery.with_changes(scheduled_at=new_timestamp)
