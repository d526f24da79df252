"""Tests for calendar grid generation."""

from datetime import date, timedelta

import pytest

from surgery_agenda.models import ViewMode
from surgery_agenda.scheduling.grid import (
    build_grid,
    column_headers,
    day_heading,
    days_in_month,
    grid_title,
    is_today,
    navigate,
    next_period,
    previous,
    today_in,
    weekday_index,
)


class TestMonthGrid:
    def test_february_2024(self):
        """Feb 1st 2024 is a Thursday: four padding cells then 29 days."""
        cells = build_grid(date(2024, 2, 15), ViewMode.MONTH)

        assert len(cells) == 33
        assert cells[:4] == [None, None, None, None]
        assert cells[4] == date(2024, 2, 1)
        assert cells[-1] == date(2024, 2, 29)

    def test_month_starting_on_sunday_has_no_padding(self):
        cells = build_grid(date(2024, 9, 30), "month")
        assert cells[0] == date(2024, 9, 1)
        assert len(cells) == 30

    @pytest.mark.parametrize("year", [2023, 2024, 2100])
    def test_every_month(self, year: int):
        for month in range(1, 13):
            cells = build_grid(date(year, month, 1), ViewMode.MONTH)
            first = date(year, month, 1)
            padding = [c for c in cells if c is None]
            days = [c for c in cells if c is not None]

            assert len(padding) == weekday_index(first)
            assert cells[: len(padding)] == padding
            assert len(days) == days_in_month(year, month)
            assert days == [first + timedelta(days=n) for n in range(len(days))]

    def test_leap_years(self):
        assert days_in_month(2024, 2) == 29
        assert days_in_month(2023, 2) == 28
        assert days_in_month(2100, 2) == 28
        assert days_in_month(2000, 2) == 29


class TestWeekGrid:
    @pytest.mark.parametrize("offset", range(7))
    def test_week_starts_on_sunday(self, offset: int):
        reference = date(2024, 3, 10) + timedelta(days=offset)  # 2024-03-10 is a Sunday
        cells = build_grid(reference, ViewMode.WEEK)

        assert len(cells) == 7
        assert cells[0] == date(2024, 3, 10)
        assert weekday_index(cells[0]) == 0
        assert reference in cells

    def test_week_crossing_month_boundary(self):
        cells = build_grid(date(2024, 3, 1), ViewMode.WEEK)
        assert cells[0] == date(2024, 2, 25)
        assert cells[-1] == date(2024, 3, 2)


class TestNavigation:
    def test_month_navigation_lands_on_first(self):
        assert next_period(date(2024, 1, 31), ViewMode.MONTH) == date(2024, 2, 1)
        assert previous(date(2024, 3, 31), ViewMode.MONTH) == date(2024, 2, 1)

    def test_month_navigation_crosses_years(self):
        assert next_period(date(2024, 12, 15), ViewMode.MONTH) == date(2025, 1, 1)
        assert previous(date(2024, 1, 15), ViewMode.MONTH) == date(2023, 12, 1)
        assert navigate(date(2024, 5, 5), ViewMode.MONTH, -17) == date(2022, 12, 1)

    def test_week_navigation(self):
        assert next_period(date(2024, 2, 27), ViewMode.WEEK) == date(2024, 3, 5)
        assert previous(date(2024, 3, 5), ViewMode.WEEK) == date(2024, 2, 27)

    def test_previous_then_next_is_identity_for_weeks(self):
        reference = date(2024, 7, 18)
        assert next_period(previous(reference, "week"), "week") == reference


def test_is_today():
    today = date(2024, 2, 14)
    assert is_today(date(2024, 2, 14), today)
    assert not is_today(date(2023, 2, 14), today)
    assert not is_today(None, today)


def test_today_in_returns_date():
    assert isinstance(today_in("UTC"), date)


def test_grid_title():
    assert grid_title(date(2024, 2, 10)) == "fevereiro de 2024"
    assert grid_title(date(2023, 12, 1)) == "dezembro de 2023"


def test_column_headers_align_with_cells():
    headers = column_headers()
    cells = build_grid(date(2024, 2, 1), ViewMode.MONTH)
    assert headers[0] == "Dom"
    # Feb 1st 2024 sits under Thursday
    assert headers[cells.index(date(2024, 2, 1))] == "Qui"


def test_day_heading():
    assert day_heading(date(2024, 3, 10)) == "domingo, 10 de março"
