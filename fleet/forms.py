"""
Form parsing for the registry screens.

Each parse_* function turns submitted form fields into a record, raising
FormError on a missing required field or a malformed value. Parsing runs
before any store call, so an invalid submission never reaches the store.
"""

import math
from datetime import date
from typing import Any, Mapping, Optional, Union

from .calculations import calc_next_date, calc_next_mileage
from .errors import FormError
from .expense import Category, Expense, make_expense
from .maintenance import Maintenance
from .maintenance_type import MaintenanceType
from .vehicle import Vehicle

Number = Union[int, float]


def _text(form: Mapping[str, Any], name: str, label: str, required: bool = False) -> Optional[str]:
    value = (form.get(name) or "").strip()
    if not value:
        if required:
            raise FormError(f"{label} is required")
        return None
    return value


def to_number(value: Any) -> Optional[Number]:
    """Parse a form number, keeping integral values as int."""
    if value is None or str(value).strip() == "":
        return None
    number = float(str(value).strip().replace(",", "."))
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    return int(number) if number.is_integer() else number


def _number(
    form: Mapping[str, Any],
    name: str,
    label: str,
    required: bool = False,
    minimum: Optional[Number] = None,
) -> Optional[Number]:
    try:
        value = to_number(form.get(name))
    except ValueError:
        raise FormError(f"{label} must be a number")
    if value is None:
        if required:
            raise FormError(f"{label} is required")
        return None
    if minimum is not None and value < minimum:
        raise FormError(f"{label} must be at least {minimum}")
    return value


def _date(form: Mapping[str, Any], name: str, label: str, required: bool = False) -> Optional[str]:
    value = _text(form, name, label, required)
    if value is None:
        return None
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        raise FormError(f"{label} must be a date (YYYY-MM-DD)")


def parse_vehicle_form(form: Mapping[str, Any]) -> Vehicle:
    plate = _text(form, "plate", "Plate", required=True)
    model = _text(form, "model", "Model", required=True)
    year = _number(form, "year", "Year", required=True, minimum=1900)
    if not isinstance(year, int):
        raise FormError("Year must be a whole number")
    mileage = _number(form, "current_mileage", "Current mileage", minimum=0)
    return Vehicle(
        plate.upper(),
        model,
        year,
        brand=_text(form, "brand", "Brand"),
        color=_text(form, "color", "Color"),
        current_mileage=mileage if mileage is not None else 0,
    )


def parse_maintenance_form(form: Mapping[str, Any]) -> Maintenance:
    return Maintenance(
        _text(form, "vehicle_id", "Vehicle", required=True),
        _text(form, "title", "Title", required=True),
        _date(form, "date", "Date", required=True),
        _number(form, "mileage", "Mileage", required=True, minimum=0),
        maintenance_type_id=_text(form, "maintenance_type_id", "Maintenance type"),
        description=_text(form, "description", "Description"),
        cost=_number(form, "cost", "Cost", minimum=0),
        next_date=_date(form, "next_date", "Next date"),
        next_mileage=_number(form, "next_mileage", "Next mileage", minimum=0),
    )


def parse_expense_form(form: Mapping[str, Any]) -> Expense:
    category = _text(form, "category", "Category", required=True)
    try:
        category = Category(category)
    except ValueError:
        raise FormError(f"Unknown category: {category}")
    liters = None
    if category is Category.FUEL:
        liters = _number(form, "liters", "Liters", minimum=0)
    return make_expense(
        _text(form, "vehicle_id", "Vehicle", required=True),
        category,
        _number(form, "amount", "Amount", required=True, minimum=0),
        _date(form, "date", "Date", required=True),
        description=_text(form, "description", "Description"),
        liters=liters,
    )


def _format_number(value: Optional[Number]) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


class MaintenanceForm:
    """
    Unsaved maintenance form state, held as the strings the form submits.

    Selecting a maintenance type prefills title and description and projects
    the next-due fields from the type's intervals.
    """

    FIELDS = (
        "vehicle_id",
        "maintenance_type_id",
        "title",
        "description",
        "date",
        "mileage",
        "cost",
        "next_date",
        "next_mileage",
    )

    def __init__(self, **values: Any):
        for name in self.FIELDS:
            value = values.get(name)
            setattr(self, name, "" if value is None else str(value))

    @classmethod
    def blank(cls, today: date) -> "MaintenanceForm":
        return cls(date=today.isoformat(), mileage="0")

    @classmethod
    def from_request(cls, form: Mapping[str, Any]) -> "MaintenanceForm":
        return cls(**{name: form.get(name) for name in cls.FIELDS})

    @classmethod
    def from_maintenance(cls, maintenance: Maintenance) -> "MaintenanceForm":
        # The type is not carried into edits; picking one again re-derives
        return cls(
            vehicle_id=maintenance.vehicle_id,
            title=maintenance.title,
            description=maintenance.description,
            date=maintenance.date,
            mileage=_format_number(maintenance.mileage),
            cost=_format_number(maintenance.cost),
            next_date=maintenance.next_date,
            next_mileage=_format_number(maintenance.next_mileage),
        )

    def apply_type(self, mtype: MaintenanceType, today: Optional[date] = None) -> None:
        """
        Prefill from a maintenance type.

        next_date is the form date plus interval_months; next_mileage is the
        form mileage plus interval_km. A field whose interval the type lacks
        keeps its current value.
        """
        self.maintenance_type_id = mtype.id or ""
        self.title = mtype.name
        self.description = mtype.description or ""

        if mtype.interval_months is not None:
            try:
                service_date = date.fromisoformat(self.date) if self.date else (today or date.today())
            except ValueError:
                service_date = None
            next_date = calc_next_date(service_date, mtype.interval_months)
            if next_date is not None:
                self.next_date = next_date.isoformat()

        if mtype.interval_km is not None:
            try:
                mileage = to_number(self.mileage)
            except ValueError:
                mileage = None
            self.next_mileage = _format_number(calc_next_mileage(mileage, mtype.interval_km))
