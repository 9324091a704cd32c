"""Dashboard aggregation over a user's vehicles, maintenances and expenses."""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Sequence

from .alert import Alert
from .calculations import check_status, days_until, km_until, monthly_total
from .expense import Expense
from .maintenance import Maintenance
from .status import Status
from .vehicle import Vehicle


@dataclass
class DashboardSummary:
    """Summary counts and alert lists shown on the dashboard."""

    total_vehicles: int = 0
    upcoming_maintenances: int = 0
    monthly_expenses: float = 0
    alerts: List[Alert] = field(default_factory=list)
    overdue: List[Alert] = field(default_factory=list)

    @property
    def pending_alerts(self) -> int:
        return len(self.alerts)


def make_alert(maintenance: Maintenance, today: date) -> Alert:
    """Compute the alert record for one maintenance joined with its vehicle."""
    vehicle = maintenance.vehicle
    current_mileage = vehicle.current_mileage if vehicle else None
    status = check_status(
        maintenance.next_date, maintenance.next_mileage, current_mileage, today
    )

    days_remaining = None
    if maintenance.next_date is not None:
        days_remaining = days_until(maintenance.next_date, today)
    km_remaining = None
    if maintenance.next_mileage is not None and current_mileage is not None:
        km_remaining = km_until(maintenance.next_mileage, current_mileage)

    return Alert(
        maintenance_id=maintenance.id,
        vehicle_plate=vehicle.plate if vehicle else "N/A",
        maintenance_title=maintenance.title,
        status=status,
        next_date=maintenance.next_date,
        next_mileage=maintenance.next_mileage,
        current_mileage=current_mileage or 0,
        days_remaining=days_remaining,
        km_remaining=km_remaining,
    )


def compute_alerts(maintenances: Sequence[Maintenance], today: date) -> List[Alert]:
    """Alerts for every scheduled maintenance, in input order."""
    return [make_alert(m, today) for m in maintenances if m.is_scheduled]


def build_dashboard(
    vehicles: Sequence[Vehicle],
    maintenances: Sequence[Maintenance],
    expenses: Sequence[Expense],
    today: date,
) -> DashboardSummary:
    """
    Aggregate the dashboard.

    Due-soon alerts keep the order the maintenances were given in. Overdue
    items are never counted as pending alerts; they are listed separately.
    """
    alerts = compute_alerts(maintenances, today)
    return DashboardSummary(
        total_vehicles=len(vehicles),
        upcoming_maintenances=len(maintenances),
        monthly_expenses=monthly_total(expenses, today),
        alerts=[a for a in alerts if a.status == Status.DUE_SOON],
        overdue=[a for a in alerts if a.status == Status.OVERDUE],
    )
