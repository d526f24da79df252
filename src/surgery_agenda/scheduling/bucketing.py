"""Place surgeries into calendar cells by local date."""

from collections.abc import Iterable
from datetime import date

import arrow
from pydantic import BaseModel, ConfigDict, Field

from surgery_agenda.models.domain import Surgery
from surgery_agenda.scheduling.grid import GridCells, is_today


class GridCell(BaseModel):
    """A rendered calendar cell with the surgeries of that day."""

    model_config = ConfigDict(frozen=True)

    day: date | None = None
    surgeries: list[Surgery] = Field(default_factory=list)
    is_today: bool = False

    @property
    def is_padding(self) -> bool:
        return self.day is None


def local_date(surgery: Surgery, tz: str = "UTC") -> date | None:
    """Calendar date of the surgery in the display timezone."""
    if surgery.scheduled_at is None:
        return None
    return arrow.get(surgery.scheduled_at).to(tz).date()


def sort_by_time(surgeries: Iterable[Surgery]) -> list[Surgery]:
    """Ascending by timestamp; ``sorted`` is stable so ties keep input order."""
    return sorted((s for s in surgeries if s.scheduled_at is not None), key=lambda s: s.scheduled_at)


def surgeries_on(surgeries: Iterable[Surgery], day: date, tz: str = "UTC") -> list[Surgery]:
    """Scheduled surgeries falling on ``day``, in time order."""
    return sort_by_time(s for s in surgeries if local_date(s, tz) == day)


def group_by_day(surgeries: Iterable[Surgery], tz: str = "UTC") -> dict[date, list[Surgery]]:
    """Index scheduled surgeries by local date; unscheduled ones are left out."""
    buckets: dict[date, list[Surgery]] = {}
    for surgery in sort_by_time(surgeries):
        buckets.setdefault(local_date(surgery, tz), []).append(surgery)
    return buckets


def bucket_grid(cells: GridCells, surgeries: Iterable[Surgery], tz: str = "UTC", today: date | None = None) -> list[GridCell]:
    """Attach surgeries to each cell of a grid produced by ``build_grid``."""
    buckets = group_by_day(surgeries, tz)
    return [
        GridCell(
            day=cell,
            surgeries=list(buckets.get(cell, [])) if cell is not None else [],
            is_today=is_today(cell, today) if today is not None else False,
        )
        for cell in cells
    ]
