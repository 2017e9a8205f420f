"""Payback schedule engine package."""

from app.services.schedule.base import (
    FrequencyRule,
    PaybackTerms,
    ScheduledPayback,
)
from app.services.schedule.calendar import HolidayCalendar
from app.services.schedule.engine import PaybackScheduleEngine, total_of

__all__ = [
    "FrequencyRule",
    "HolidayCalendar",
    "PaybackScheduleEngine",
    "PaybackTerms",
    "ScheduledPayback",
    "total_of",
]
