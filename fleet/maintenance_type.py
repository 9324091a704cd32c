"""MaintenanceType class for reusable service interval templates."""
from typing import Optional


class MaintenanceType:
    """A template defining a service interval by months and/or distance."""

    def __init__(
            self,
            name: str,
            description: Optional[str] = None,
            interval_months: Optional[int] = None,
            interval_km: Optional[float] = None,
            id: Optional[str] = None,
            created_at: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.description = description
        self.interval_months = interval_months
        self.interval_km = interval_km
        self.created_at = created_at

    @property
    def has_interval(self) -> bool:
        return self.interval_months is not None or self.interval_km is not None

    @property
    def interval_label(self) -> str:
        """Interval as '6 mo / 10,000 km', or '-' when the type has none."""
        parts = []
        if self.interval_months is not None:
            parts.append(f"{self.interval_months} mo")
        if self.interval_km is not None:
            parts.append(f"{self.interval_km:,.0f} km")
        return " / ".join(parts) if parts else "-"
