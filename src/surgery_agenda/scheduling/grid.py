"""Calendar grid generation.

Grids are plain lists of cells. A cell is either a ``date`` or ``None`` for the
padding that aligns day 1 of a month under its weekday column. Columns start
on Sunday (weekday index 0).

Everything here is a pure function of its arguments; callers keep the
reference date and view mode themselves.
"""

import calendar
from datetime import date, timedelta

import arrow

from surgery_agenda.constants import MONTH_NAMES, WEEKDAY_LABELS, WEEKDAY_NAMES
from surgery_agenda.models.enums import ViewMode

GridCells = list[date | None]


def weekday_index(day: date) -> int:
    """Weekday index with Sunday = 0 ... Saturday = 6."""
    return (day.weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def week_start(day: date) -> date:
    """The Sunday on or before ``day``."""
    return day - timedelta(days=weekday_index(day))


def month_grid(reference: date) -> GridCells:
    first = reference.replace(day=1)
    leading: GridCells = [None] * weekday_index(first)
    days = [first.replace(day=n) for n in range(1, days_in_month(first.year, first.month) + 1)]
    return leading + days


def week_grid(reference: date) -> GridCells:
    start = week_start(reference)
    return [start + timedelta(days=offset) for offset in range(7)]


def build_grid(reference: date, mode: ViewMode | str) -> GridCells:
    """Build the cells of the month or week containing ``reference``.

    Args:
        reference: Any date inside the period to display
        mode: ``ViewMode.MONTH`` or ``ViewMode.WEEK``

    Returns:
        Month mode: leading ``None`` padding followed by every day of the month.
        Week mode: the seven days from Sunday to Saturday.
    """
    if ViewMode(mode) is ViewMode.MONTH:
        return month_grid(reference)
    return week_grid(reference)


def navigate(reference: date, mode: ViewMode | str, step: int) -> date:
    """Shift the reference date by ``step`` periods.

    Month mode lands on day 1 of the target month; week mode moves by whole
    weeks and keeps the weekday.
    """
    if ViewMode(mode) is ViewMode.MONTH:
        month_index = reference.year * 12 + (reference.month - 1) + step
        return date(month_index // 12, month_index % 12 + 1, 1)
    return reference + timedelta(days=7 * step)


def previous(reference: date, mode: ViewMode | str) -> date:
    return navigate(reference, mode, -1)


def next_period(reference: date, mode: ViewMode | str) -> date:
    return navigate(reference, mode, 1)


def today_in(tz: str) -> date:
    """Current calendar date in ``tz``."""
    return arrow.now(tz).date()


def is_today(cell: date | None, today: date) -> bool:
    """A cell is today when year, month and day match; padding never is."""
    if cell is None:
        return False
    return (cell.year, cell.month, cell.day) == (today.year, today.month, today.day)


def grid_title(reference: date) -> str:
    """Heading such as ``"fevereiro de 2024"``."""
    return f"{MONTH_NAMES[reference.month - 1]} de {reference.year}"


def column_headers() -> list[str]:
    """Short weekday names for the grid columns, Sunday first."""
    return list(WEEKDAY_LABELS)


def day_heading(day: date) -> str:
    """Heading of the day detail panel, e.g. ``"domingo, 10 de março"``."""
    return f"{WEEKDAY_NAMES[weekday_index(day)]}, {day.day} de {MONTH_NAMES[day.month - 1]}"
