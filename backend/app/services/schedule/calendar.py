"""US federal holiday calendar backed by pandas."""

import logging
from datetime import date, timedelta
from typing import Dict, FrozenSet

from pandas.tseries.holiday import USFederalHolidayCalendar

logger = logging.getLogger(__name__)


class HolidayCalendar:
    """
    Answers holiday and business-day questions for payback scheduling.

    Holidays inside the configured year window are computed once, on first
    use, with a single pandas call; years outside it are computed and
    cached one at a time as they are asked for.
    """

    def __init__(self, start_year: int = 2020, end_year: int = 2040):
        """
        Initialize the calendar.

        Args:
            start_year: First year of the preloaded window
            end_year: Last year of the preloaded window
        """
        if start_year > end_year:
            raise ValueError("start_year cannot exceed end_year")

        self.start_year = start_year
        self.end_year = end_year
        self._calendar = USFederalHolidayCalendar()
        self._holidays: Dict[int, FrozenSet[date]] = {}
        self._window_loaded = False

    def _load(self, first_year: int, last_year: int) -> None:
        index = self._calendar.holidays(
            start=f"{first_year}-01-01",
            end=f"{last_year}-12-31",
        )
        by_year: Dict[int, set] = {year: set() for year in range(first_year, last_year + 1)}
        for timestamp in index:
            by_year[timestamp.year].add(timestamp.date())
        for year, days in by_year.items():
            self._holidays[year] = frozenset(days)

    def holidays_for_year(self, year: int) -> FrozenSet[date]:
        """
        Return the observed federal holidays of a calendar year.

        Args:
            year: Calendar year

        Returns:
            Frozen set of holiday dates
        """
        if not self._window_loaded:
            self._load(self.start_year, self.end_year)
            self._window_loaded = True

        if year not in self._holidays:
            logger.debug(f"Computing holidays outside the preloaded window: {year}")
            self._load(year, year)

        return self._holidays[year]

    def is_holiday(self, day: date) -> bool:
        """Whether the day is an observed US federal holiday."""
        return day in self.holidays_for_year(day.year)

    def is_business_day(self, day: date) -> bool:
        """Whether the day is neither a weekend day nor a holiday."""
        return day.weekday() < 5 and not self.is_holiday(day)

    def next_business_day(self, day: date) -> date:
        """
        Roll a day forward until it lands on a business day.

        Args:
            day: Candidate day

        Returns:
            The day itself if it is a business day, else the next one
        """
        while not self.is_business_day(day):
            day += timedelta(days=1)
        return day
