"""Statistics calculator foundation."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Callable, Iterable, List, Optional, Tuple

from app.core.money import ZERO, safe_divide, to_decimal
from app.services.statistics.results import StatisticsResult


class StatisticsCalculator(ABC):
    """
    Abstract base class for statistics calculators.

    A calculator is pure: it receives a subject record together with its
    already-loaded related records and returns a result dataclass. Loading
    is the statistics engine's job.
    """

    @abstractmethod
    def calculate(self, subject: Any, **related: Any) -> StatisticsResult:
        """
        Compute the statistics of one subject.

        Args:
            subject: The record the statistics describe
            **related: Related records, keyed by collection name

        Returns:
            The subject's result dataclass
        """
        pass

    @staticmethod
    def _amount(record: Any, attr: str = "amount") -> Decimal:
        """Read an amount attribute or key, treating missing values as zero."""
        if isinstance(record, dict):
            return to_decimal(record.get(attr))
        return to_decimal(getattr(record, attr, None))

    @classmethod
    def _total(
        cls,
        records: Iterable[Any],
        attr: str = "amount",
        where: Optional[Callable[[Any], bool]] = None,
    ) -> Tuple[int, Decimal]:
        """
        Count and sum the records matching an optional predicate.

        Args:
            records: Records to aggregate
            attr: Amount attribute (or dict key) to sum
            where: Optional predicate selecting records

        Returns:
            Tuple of (count, amount)
        """
        count = 0
        amount = ZERO
        for record in records:
            if where is not None and not where(record):
                continue
            count += 1
            amount += cls._amount(record, attr)
        return count, amount

    @staticmethod
    def _active(records: Iterable[Any]) -> List[Any]:
        """Drop records flagged inactive."""
        return [record for record in records if not getattr(record, "inactive", False)]

    @classmethod
    def _flagged_total(cls, items: Optional[Iterable[dict]], flag: Optional[str] = None) -> Decimal:
        """
        Sum the amounts of a JSON adjustment list.

        Args:
            items: List of {"name", "amount", "upfront", "syndication"} dicts
            flag: Only sum items whose flag is true; all items if omitted

        Returns:
            Total amount
        """
        total = ZERO
        for item in items or []:
            if flag is not None and item.get(flag) is not True:
                continue
            total += cls._amount(item)
        return total

    @staticmethod
    def _ratio(numerator: Any, denominator: Any) -> Decimal:
        """Quotient of two amounts, zero for a zero denominator."""
        return safe_divide(numerator, denominator)
