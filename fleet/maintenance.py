"""Maintenance class for performed and scheduled services."""
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .vehicle import Vehicle


class Maintenance:
    """A service performed on a vehicle, with optional next-due projection."""

    def __init__(
            self,
            vehicle_id: str,
            title: str,
            date: str,
            mileage: float,
            maintenance_type_id: Optional[str] = None,
            description: Optional[str] = None,
            cost: Optional[float] = None,
            next_date: Optional[str] = None,
            next_mileage: Optional[float] = None,
            id: Optional[str] = None,
            created_at: Optional[str] = None,
            updated_at: Optional[str] = None,
            vehicle: Optional["Vehicle"] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.maintenance_type_id = maintenance_type_id
        self.title = title
        self.description = description
        self.date = date
        self.mileage = mileage
        self.cost = cost
        self.next_date = next_date
        self.next_mileage = next_mileage
        self.created_at = created_at
        self.updated_at = updated_at
        # Snapshot of the owning vehicle, joined in at read time
        self.vehicle = vehicle

    @property
    def is_scheduled(self) -> bool:
        """True when a next-due date or mileage is set."""
        return self.next_date is not None or self.next_mileage is not None
