"""Calendar grid, filtering and rescheduling functions.

Every function in this package is pure: inputs are immutable models or dates
and results are new values.
"""

from surgery_agenda.scheduling.bucketing import GridCell, bucket_grid, group_by_day, local_date, surgeries_on
from surgery_agenda.scheduling.filtering import filter_surgeries, involves_doctor, matches, search_by_patient
from surgery_agenda.scheduling.grid import (
    build_grid,
    column_headers,
    day_heading,
    grid_title,
    is_today,
    navigate,
    next_period,
    previous,
    today_in,
    week_start,
    weekday_index,
)
from surgery_agenda.scheduling.reschedule import apply_drop, reschedule

__all__ = [
    "GridCell",
    "apply_drop",
    "bucket_grid",
    "build_grid",
    "column_headers",
    "day_heading",
    "filter_surgeries",
    "grid_title",
    "group_by_day",
    "involves_doctor",
    "is_today",
    "local_date",
    "matches",
    "navigate",
    "next_period",
    "previous",
    "reschedule",
    "search_by_patient",
    "surgeries_on",
    "today_in",
    "week_start",
    "weekday_index",
]
