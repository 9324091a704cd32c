"""
Owner-scoped access to the fleet tables.

A FleetRepository is the per-session context every screen works through: it
pairs the store with the signed-in user and applies an explicit vehicle-id
filter to every maintenance and expense read and write.
"""

from datetime import date
from typing import Dict, List, Optional

from .calculations import ExpenseTotals, category_totals, start_of_month
from .dashboard import DashboardSummary, build_dashboard
from .errors import NotFoundError
from .expense import Expense
from .maintenance import Maintenance
from .maintenance_type import MaintenanceType
from .rows import (
    expense_from_row,
    expense_to_row,
    maintenance_from_row,
    maintenance_to_row,
    maintenance_type_from_row,
    maintenance_type_to_row,
    vehicle_from_row,
    vehicle_to_row,
)
from .store import Store
from .user import User
from .vehicle import Vehicle


class FleetRepository:
    """Reads and writes scoped to one user's vehicles."""

    def __init__(self, store: Store, user: User):
        self.store = store
        self.user = user

    # -- vehicles ------------------------------------------------------------

    def list_vehicles(self) -> List[Vehicle]:
        """The user's vehicles, newest first."""
        rows = (
            self.store.table("vehicles")
            .eq("user_id", self.user.id)
            .order("created_at", desc=True)
            .execute()
        )
        return [vehicle_from_row(r) for r in rows]

    def vehicle_ids(self) -> List[str]:
        rows = self.store.table("vehicles").select("id").eq("user_id", self.user.id).execute()
        return [r["id"] for r in rows]

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        row = (
            self.store.table("vehicles")
            .eq("user_id", self.user.id)
            .eq("id", vehicle_id)
            .first()
        )
        if row is None:
            raise NotFoundError("Vehicle not found")
        return vehicle_from_row(row)

    def create_vehicle(self, vehicle: Vehicle) -> Vehicle:
        row = vehicle_to_row(vehicle)
        row["user_id"] = self.user.id
        return vehicle_from_row(self.store.insert("vehicles", row))

    def update_vehicle(self, vehicle_id: str, vehicle: Vehicle) -> Vehicle:
        self.get_vehicle(vehicle_id)
        return vehicle_from_row(
            self.store.update("vehicles", vehicle_id, vehicle_to_row(vehicle))
        )

    def delete_vehicle(self, vehicle_id: str) -> None:
        """Delete a vehicle. Its maintenances and expenses are deleted with it."""
        self.get_vehicle(vehicle_id)
        self.store.delete("vehicles", vehicle_id)

    def _vehicles_by_id(self) -> Dict[str, Vehicle]:
        return {v.id: v for v in self.list_vehicles()}

    # -- maintenance types ---------------------------------------------------

    def list_maintenance_types(self) -> List[MaintenanceType]:
        rows = self.store.table("maintenance_types").order("name").execute()
        return [maintenance_type_from_row(r) for r in rows]

    def get_maintenance_type(self, type_id: str) -> MaintenanceType:
        row = self.store.table("maintenance_types").eq("id", type_id).first()
        if row is None:
            raise NotFoundError("Maintenance type not found")
        return maintenance_type_from_row(row)

    def create_maintenance_type(self, mtype: MaintenanceType) -> MaintenanceType:
        return maintenance_type_from_row(
            self.store.insert("maintenance_types", maintenance_type_to_row(mtype))
        )

    # -- maintenances --------------------------------------------------------

    def list_maintenances(self) -> List[Maintenance]:
        """Maintenances on the user's vehicles, newest service first."""
        vehicles = self._vehicles_by_id()
        rows = (
            self.store.table("maintenances")
            .in_("vehicle_id", vehicles)
            .order("date", desc=True)
            .execute()
        )
        return [maintenance_from_row(r, vehicles.get(r["vehicle_id"])) for r in rows]

    def get_maintenance(self, maintenance_id: str) -> Maintenance:
        vehicles = self._vehicles_by_id()
        row = (
            self.store.table("maintenances")
            .in_("vehicle_id", vehicles)
            .eq("id", maintenance_id)
            .first()
        )
        if row is None:
            raise NotFoundError("Maintenance not found")
        return maintenance_from_row(row, vehicles.get(row["vehicle_id"]))

    def create_maintenance(self, maintenance: Maintenance) -> Maintenance:
        vehicle = self.get_vehicle(maintenance.vehicle_id)
        row = self.store.insert("maintenances", maintenance_to_row(maintenance))
        return maintenance_from_row(row, vehicle)

    def update_maintenance(self, maintenance_id: str, maintenance: Maintenance) -> Maintenance:
        self.get_maintenance(maintenance_id)
        vehicle = self.get_vehicle(maintenance.vehicle_id)
        row = self.store.update(
            "maintenances", maintenance_id, maintenance_to_row(maintenance)
        )
        return maintenance_from_row(row, vehicle)

    def delete_maintenance(self, maintenance_id: str) -> None:
        self.get_maintenance(maintenance_id)
        self.store.delete("maintenances", maintenance_id)

    # -- expenses ------------------------------------------------------------

    def list_expenses(self, since: Optional[date] = None) -> List[Expense]:
        """Expenses on the user's vehicles, newest first, optionally dated on/after since."""
        vehicles = self._vehicles_by_id()
        query = self.store.table("expenses").in_("vehicle_id", vehicles)
        if since is not None:
            query = query.gte("date", since.isoformat())
        rows = query.order("date", desc=True).execute()
        return [expense_from_row(r, vehicles.get(r["vehicle_id"])) for r in rows]

    def get_expense(self, expense_id: str) -> Expense:
        vehicles = self._vehicles_by_id()
        row = (
            self.store.table("expenses")
            .in_("vehicle_id", vehicles)
            .eq("id", expense_id)
            .first()
        )
        if row is None:
            raise NotFoundError("Expense not found")
        return expense_from_row(row, vehicles.get(row["vehicle_id"]))

    def create_expense(self, expense: Expense) -> Expense:
        vehicle = self.get_vehicle(expense.vehicle_id)
        return expense_from_row(self.store.insert("expenses", expense_to_row(expense)), vehicle)

    def update_expense(self, expense_id: str, expense: Expense) -> Expense:
        self.get_expense(expense_id)
        vehicle = self.get_vehicle(expense.vehicle_id)
        row = self.store.update("expenses", expense_id, expense_to_row(expense))
        return expense_from_row(row, vehicle)

    def delete_expense(self, expense_id: str) -> None:
        self.get_expense(expense_id)
        self.store.delete("expenses", expense_id)

    def expense_totals(self) -> ExpenseTotals:
        """Totals over the full expense history."""
        return category_totals(self.list_expenses())

    # -- dashboard -----------------------------------------------------------

    def dashboard(self, today: Optional[date] = None) -> DashboardSummary:
        today = today or date.today()
        return build_dashboard(
            self.list_vehicles(),
            self.list_maintenances(),
            self.list_expenses(since=start_of_month(today)),
            today,
        )
