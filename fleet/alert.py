"""Alert dataclass for computed maintenance due status."""

from dataclasses import dataclass
from typing import Optional

from .status import Status


@dataclass
class Alert:
    """A maintenance whose next service is due soon or overdue."""

    maintenance_id: Optional[str]
    vehicle_plate: str
    maintenance_title: str
    status: Status
    next_date: Optional[str] = None
    next_mileage: Optional[float] = None
    current_mileage: float = 0
    days_remaining: Optional[int] = None
    km_remaining: Optional[float] = None
