"""
Expense records.

Expenses are a tagged variant keyed on category: only fuel expenses carry
liters, so a non-fuel expense with liters cannot be constructed.
"""

from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .vehicle import Vehicle


class Category(str, Enum):
    """Fixed expense categories, in display order."""

    FUEL = "fuel"
    MAINTENANCE = "maintenance"
    INSURANCE = "insurance"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Expense:
    """A maintenance, insurance or other expense against a vehicle."""

    def __init__(
        self,
        vehicle_id: str,
        category: Category,
        amount: float,
        date: str,
        description: Optional[str] = None,
        id: Optional[str] = None,
        created_at: Optional[str] = None,
        vehicle: Optional["Vehicle"] = None,
    ):
        category = Category(category)
        if category is Category.FUEL and not isinstance(self, FuelExpense):
            raise TypeError("fuel expenses must be created as FuelExpense")
        self.id = id
        self.vehicle_id = vehicle_id
        self.category = category
        self.amount = amount
        self.date = date
        self.description = description
        self.created_at = created_at
        self.vehicle = vehicle

    @property
    def liters(self) -> Optional[float]:
        return None


class FuelExpense(Expense):
    """A fuel purchase. The only kind of expense that records liters."""

    def __init__(
        self,
        vehicle_id: str,
        amount: float,
        date: str,
        liters: Optional[float] = None,
        description: Optional[str] = None,
        id: Optional[str] = None,
        created_at: Optional[str] = None,
        vehicle: Optional["Vehicle"] = None,
    ):
        super().__init__(
            vehicle_id,
            Category.FUEL,
            amount,
            date,
            description=description,
            id=id,
            created_at=created_at,
            vehicle=vehicle,
        )
        self._liters = liters

    @property
    def liters(self) -> Optional[float]:
        return self._liters

    @property
    def price_per_liter(self) -> Optional[float]:
        if not self._liters:
            return None
        return self.amount / self._liters


def make_expense(
    vehicle_id: str,
    category: str,
    amount: float,
    date: str,
    description: Optional[str] = None,
    liters: Optional[float] = None,
    **kwargs,
) -> Expense:
    """Build the right Expense variant for a category. Liters are dropped unless fuel."""
    if Category(category) is Category.FUEL:
        return FuelExpense(
            vehicle_id, amount, date, liters=liters, description=description, **kwargs
        )
    return Expense(
        vehicle_id, category, amount, date, description=description, **kwargs
    )
