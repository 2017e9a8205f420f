"""Payback schedule engine computing payback dates, lists and plan lengths."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from app.core.enums import PaybackFrequency
from app.core.money import ZERO, round_cents
from app.services.schedule.base import FrequencyRule, PaybackTerms, ScheduledPayback
from app.services.schedule.calendar import HolidayCalendar
from app.services.schedule.rules import DailyRule, MonthlyRule, WeeklyRule

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


class PaybackScheduleEngine:
    """
    Schedule engine for payback plans.

    This class:
    - Maintains a registry of frequency rules
    - Finds the n-th payback date from any date, avoiding holidays on request
    - Generates the full dated payback list of a plan
    - Derives term length and end dates
    """

    def __init__(self, calendar: Optional[HolidayCalendar] = None):
        """
        Initialize the schedule engine with frequency registry.

        Args:
            calendar: Holiday calendar; a default US federal calendar if omitted
        """
        self.calendar = calendar or HolidayCalendar()
        self._rules: Dict[PaybackFrequency, FrequencyRule] = {}
        self._register_default_rules()

    def _register_default_rules(self):
        """Register rules for all payback frequencies."""
        self._rules[PaybackFrequency.DAILY] = DailyRule()
        self._rules[PaybackFrequency.WEEKLY] = WeeklyRule()
        self._rules[PaybackFrequency.MONTHLY] = MonthlyRule()

    def register_rule(self, frequency: PaybackFrequency, rule: FrequencyRule):
        """
        Register a custom rule for a frequency.

        Args:
            frequency: The payback frequency
            rule: Rule instance to use for it
        """
        self._rules[frequency] = rule

    def _rule_for(self, terms: PaybackTerms) -> Optional[FrequencyRule]:
        if not terms.can_schedule:
            return None
        return self._rules.get(terms.frequency)

    # ===== Dates =====

    def nth_payback_date(
        self, terms: PaybackTerms, start: Optional[date], n: Optional[int]
    ) -> Optional[date]:
        """
        Find the n-th payback date on or after a start date.

        Args:
            terms: Payback terms
            start: Earliest date of the first payback
            n: 1-based index of the wanted payback

        Returns:
            The payback date, or None when terms, start or n are unusable
        """
        rule = self._rule_for(terms)
        if rule is None or start is None or not n or n <= 0:
            return None

        found = start
        for _ in range(n):
            found = rule.next_date(terms, start)
            if terms.avoid_holiday:
                found = self.calendar.next_business_day(found)
            start = found + ONE_DAY

        return found

    def scheduled_payback_date(
        self, terms: PaybackTerms, next_date: Optional[date], n: Optional[int]
    ) -> Optional[date]:
        """
        Find the n-th payback counting ``next_date`` itself as the first.

        Used to advance a running plan past a generated payback (n = 2) and
        to compute end dates.

        Args:
            terms: Payback terms
            next_date: Date of the first payback in the count
            n: 1-based index of the wanted payback

        Returns:
            The payback date, or None when terms, next_date or n are unusable
        """
        if self._rule_for(terms) is None or next_date is None or not n or n <= 0:
            return None

        first = next_date
        if terms.avoid_holiday:
            first = self.calendar.next_business_day(first)
        if n == 1:
            return first

        return self.nth_payback_date(terms, first + ONE_DAY, n - 1)

    # ===== Lists =====

    def generate_payback_list(self, terms: PaybackTerms) -> List[ScheduledPayback]:
        """
        Generate every payback of a plan with its date and amount.

        The first amount is ``next_payback_amount`` when given, otherwise the
        total split evenly; each later amount splits what is left evenly over
        the paybacks left, so the amounts always add up to the total.

        Args:
            terms: Payback terms with start date, total, count, frequency and paydays

        Returns:
            List of scheduled paybacks, empty when terms are incomplete
        """
        if (
            terms.start_date is None
            or not terms.total_amount
            or not terms.payback_count
            or not terms.can_schedule
        ):
            return []

        remaining_amount = terms.total_amount
        remaining_count = terms.payback_count
        amount = terms.next_payback_amount or round_cents(remaining_amount / remaining_count)
        if not amount:
            logger.warning(f"Payback amount rounds to zero for total {terms.total_amount}")
            return []

        paybacks: List[ScheduledPayback] = []
        start = terms.start_date
        while remaining_count > 0:
            payback_date = self.nth_payback_date(terms, start, 1)
            paybacks.append(ScheduledPayback(date=payback_date, amount=amount))

            remaining_amount -= amount
            remaining_count -= 1
            if remaining_count:
                amount = round_cents(remaining_amount / remaining_count)
            start = payback_date + ONE_DAY

        return paybacks

    # ===== Plan length =====

    def term_length(self, terms: PaybackTerms) -> Optional[Decimal]:
        """
        Plan length in months.

        DAILY plans debit len(payday_list) times a week and WEEKLY plans
        once a week, both over four-week months.

        Args:
            terms: Payback terms

        Returns:
            Term length in months, or None if count or frequency is missing
        """
        if not terms.payback_count or terms.frequency is None:
            return None

        count = Decimal(terms.payback_count)
        if terms.frequency == PaybackFrequency.DAILY:
            if not terms.payday_list:
                return None
            return count / len(terms.payday_list) / 4
        if terms.frequency == PaybackFrequency.WEEKLY:
            return count / 4
        if terms.frequency == PaybackFrequency.MONTHLY:
            return count
        return None

    def scheduled_end_date(self, terms: PaybackTerms) -> Optional[date]:
        """Date of the last payback counted from the plan start."""
        return self.scheduled_payback_date(terms, terms.start_date, terms.payback_count)

    def expected_end_date(self, terms: PaybackTerms) -> Optional[date]:
        """Date of the last payback counted from the next due payback."""
        if terms.start_date is None:
            return None
        return self.scheduled_payback_date(
            terms, terms.next_payback_date, terms.remaining_count
        )


def total_of(paybacks: List[ScheduledPayback]) -> Decimal:
    """Sum of the amounts of a payback list."""
    return sum((payback.amount for payback in paybacks), ZERO)
