"""Frequency rules for DAILY, WEEKLY and MONTHLY payback plans."""

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from app.services.schedule.base import FrequencyRule, PaybackTerms, js_weekday


class DailyRule(FrequencyRule):
    """Debits on every listed weekday."""

    def next_date(self, terms: PaybackTerms, start: date) -> date:
        paydays = sorted(terms.payday_list)
        start_day = js_weekday(start)

        # First listed weekday this week, else the first one next week
        payday = next((day for day in paydays if day >= start_day), paydays[0])
        return start + timedelta(days=(payday - start_day + 7) % 7)


class WeeklyRule(FrequencyRule):
    """Debits once a week on payday_list[0]."""

    def next_date(self, terms: PaybackTerms, start: date) -> date:
        payday = terms.payday_list[0]
        return start + timedelta(days=(payday - js_weekday(start) + 7) % 7)


class MonthlyRule(FrequencyRule):
    """
    Debits once a month on day payday_list[0].

    Days past the end of a short month clamp to its last day.
    """

    def next_date(self, terms: PaybackTerms, start: date) -> date:
        payday = terms.payday_list[0]
        if start.day > payday:
            return start + relativedelta(months=1, day=payday)
        return start + relativedelta(day=payday)
