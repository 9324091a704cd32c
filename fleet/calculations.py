"""Helper functions for alert, projection and expense calculations."""

from dataclasses import dataclass, field
from datetime import date
from dateutil.relativedelta import relativedelta
from typing import Dict, Iterable, Optional, Union

from .expense import Category, Expense
from .status import Status

DUE_SOON_DAYS = 30
DUE_SOON_KM = 1000

DateLike = Union[date, str]


def as_date(value: DateLike) -> date:
    """Accept a date or an ISO 'YYYY-MM-DD' string."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def days_until(next_date: DateLike, today: date) -> int:
    """Whole days from today to next_date. Negative once the date has passed."""
    return (as_date(next_date) - today).days


def km_until(next_mileage: float, current_mileage: float) -> float:
    """Distance left before next_mileage. Negative once it has been passed."""
    return next_mileage - current_mileage


def is_due_soon_by_date(
    next_date: Optional[DateLike], today: date, window: int = DUE_SOON_DAYS
) -> bool:
    """True when next_date falls within [today, today + window]."""
    if next_date is None:
        return False
    return 0 <= days_until(next_date, today) <= window


def is_due_soon_by_mileage(
    next_mileage: Optional[float],
    current_mileage: Optional[float],
    window: float = DUE_SOON_KM,
) -> bool:
    """True when the remaining distance falls within [0, window]."""
    if next_mileage is None or current_mileage is None:
        return False
    return 0 <= km_until(next_mileage, current_mileage) <= window


def check_status(
    next_date: Optional[DateLike],
    next_mileage: Optional[float],
    current_mileage: Optional[float],
    today: date,
) -> Status:
    """
    Classify a maintenance by its next-due fields.

    DUE_SOON wins if either the date or the mileage check passes. Only when
    neither is due soon does a negative remainder on either side make it
    OVERDUE.
    """
    if next_date is None and next_mileage is None:
        return Status.UNKNOWN

    if is_due_soon_by_date(next_date, today) or is_due_soon_by_mileage(
        next_mileage, current_mileage
    ):
        return Status.DUE_SOON

    if next_date is not None and days_until(next_date, today) < 0:
        return Status.OVERDUE
    if (
        next_mileage is not None
        and current_mileage is not None
        and km_until(next_mileage, current_mileage) < 0
    ):
        return Status.OVERDUE
    return Status.OK


def calc_next_date(
    service_date: Optional[DateLike], interval_months: Optional[int]
) -> Optional[date]:
    """Service date plus interval_months calendar months (clamped to month end)."""
    if interval_months is None or service_date is None:
        return None
    return as_date(service_date) + relativedelta(months=int(interval_months))


def calc_next_mileage(
    mileage: Optional[float], interval_km: Optional[float]
) -> Optional[float]:
    """Mileage at service plus interval_km."""
    if interval_km is None:
        return None
    return (mileage or 0) + interval_km


def start_of_month(today: date) -> date:
    return today.replace(day=1)


def monthly_total(expenses: Iterable[Expense], today: date) -> float:
    """Sum of amounts for expenses dated on or after the 1st of today's month."""
    first = start_of_month(today)
    return sum(e.amount for e in expenses if as_date(e.date) >= first)


@dataclass
class ExpenseTotals:
    """Grand total plus a total for every category, zero when empty."""

    total: float = 0
    by_category: Dict[Category, float] = field(
        default_factory=lambda: {c: 0 for c in Category}
    )

    def __getitem__(self, category: Union[Category, str]) -> float:
        return self.by_category[Category(category)]


def category_totals(expenses: Iterable[Expense]) -> ExpenseTotals:
    """Partition expense amounts by category."""
    totals = ExpenseTotals()
    for expense in expenses:
        totals.total += expense.amount
        totals.by_category[expense.category] += expense.amount
    return totals
