"""Vehicle class for fleet registry records."""

from typing import Optional


class Vehicle:
    """A vehicle owned by exactly one user."""

    def __init__(
        self,
        plate: str,
        model: str,
        year: int,
        user_id: Optional[str] = None,
        brand: Optional[str] = None,
        color: Optional[str] = None,
        current_mileage: Optional[float] = 0,
        id: Optional[str] = None,
        created_at: Optional[str] = None,
        updated_at: Optional[str] = None,
    ):
        self.id = id
        self.user_id = user_id
        self.plate = plate
        self.model = model
        self.brand = brand
        self.year = year
        self.color = color
        self.current_mileage = current_mileage
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        base = f"{self.brand} {self.model}" if self.brand else self.model
        return f"{base} ({self.year})"

    @property
    def label(self) -> str:
        """Plate plus model, as shown in vehicle pickers."""
        return f"{self.plate} - {self.model}"
