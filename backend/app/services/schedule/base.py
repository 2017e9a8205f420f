"""Payback schedule foundation with terms, scheduled paybacks and the frequency rule base."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional

from app.core.enums import PaybackFrequency
from app.core.money import optional_decimal


@dataclass
class PaybackTerms:
    """
    Scheduling inputs of a payback plan, saved or not.

    Weekdays in ``payday_list`` use 0 = Sunday through 6 = Saturday for
    DAILY and WEEKLY plans; MONTHLY plans use ``payday_list[0]`` as the
    day of month.

    Attributes:
        frequency: Debit frequency
        payday_list: Paydays, weekdays or day of month depending on frequency
        avoid_holiday: Roll dates past weekends and holidays
        start_date: First day the plan may debit
        total_amount: Amount to collect over the whole plan
        payback_count: Number of paybacks in the plan
        next_payback_date: Next due date of a running plan
        next_payback_amount: Amount of the next payback, if already known
        remaining_count: Paybacks left on a running plan
    """

    frequency: Optional[PaybackFrequency] = None
    payday_list: List[int] = field(default_factory=list)
    avoid_holiday: bool = False
    start_date: Optional[date] = None
    total_amount: Optional[Decimal] = None
    payback_count: Optional[int] = None
    next_payback_date: Optional[date] = None
    next_payback_amount: Optional[Decimal] = None
    remaining_count: Optional[int] = None

    def __post_init__(self):
        """Normalize amounts to Decimal and paydays to ints."""
        self.total_amount = optional_decimal(self.total_amount)
        self.next_payback_amount = optional_decimal(self.next_payback_amount)
        self.payday_list = [int(day) for day in (self.payday_list or [])]

    @classmethod
    def from_plan(
        cls,
        plan: Any,
        next_payback_amount: Optional[Decimal] = None,
        remaining_count: Optional[int] = None,
    ) -> "PaybackTerms":
        """
        Build terms from a stored payback plan.

        Args:
            plan: PaybackPlan row (or any object with the same attributes)
            next_payback_amount: Amount of the next payback from plan statistics
            remaining_count: Paybacks left from plan statistics

        Returns:
            PaybackTerms for the plan
        """
        return cls(
            frequency=plan.frequency,
            payday_list=list(plan.payday_list or []),
            avoid_holiday=bool(plan.avoid_holiday),
            start_date=plan.start_date,
            total_amount=plan.total_amount,
            payback_count=plan.payback_count,
            next_payback_date=plan.next_payback_date,
            next_payback_amount=next_payback_amount,
            remaining_count=remaining_count,
        )

    @property
    def can_schedule(self) -> bool:
        """Whether frequency and paydays are set, so dates can be computed."""
        return self.frequency is not None and bool(self.payday_list)


@dataclass
class ScheduledPayback:
    """One entry of a generated payback list."""

    date: date
    amount: Decimal


def js_weekday(day: date) -> int:
    """Weekday with 0 = Sunday through 6 = Saturday."""
    return (day.weekday() + 1) % 7


class FrequencyRule(ABC):
    """
    Abstract base class for frequency rules using the Strategy pattern.

    Each concrete rule finds the first raw payday on or after a date for
    one payback frequency. Holiday avoidance and repetition are handled by
    the engine.
    """

    @abstractmethod
    def next_date(self, terms: PaybackTerms, start: date) -> date:
        """
        Find the first payday on or after ``start``.

        Args:
            terms: Payback terms with a non-empty payday_list
            start: Earliest acceptable date

        Returns:
            The payday, before any holiday adjustment
        """
        pass
