"""
Vehicle fleet management models.

This package provides the records and logic behind the fleet screens:
- Vehicle, MaintenanceType, Maintenance, Expense/FuelExpense, User: records
- Status, Alert: computed maintenance urgency
- calculations: alert predicates, next-due projection, expense totals
- Store: YAML-file relational store with a query builder
- FleetRepository: owner-scoped reads and writes over the store
"""

from .status import Status
from .user import User
from .vehicle import Vehicle
from .maintenance_type import MaintenanceType
from .maintenance import Maintenance
from .expense import Category, Expense, FuelExpense, make_expense
from .alert import Alert
from .calculations import (
    DUE_SOON_DAYS,
    DUE_SOON_KM,
    ExpenseTotals,
    calc_next_date,
    calc_next_mileage,
    category_totals,
    check_status,
    days_until,
    is_due_soon_by_date,
    is_due_soon_by_mileage,
    monthly_total,
    start_of_month,
)
from .dashboard import DashboardSummary, build_dashboard, compute_alerts
from .errors import FleetError, FormError, IntegrityError, NotFoundError, StoreError
from .store import Store
from .repository import FleetRepository

__all__ = [
    "Status",
    "User",
    "Vehicle",
    "MaintenanceType",
    "Maintenance",
    "Category",
    "Expense",
    "FuelExpense",
    "make_expense",
    "Alert",
    "DUE_SOON_DAYS",
    "DUE_SOON_KM",
    "ExpenseTotals",
    "calc_next_date",
    "calc_next_mileage",
    "category_totals",
    "check_status",
    "days_until",
    "is_due_soon_by_date",
    "is_due_soon_by_mileage",
    "monthly_total",
    "start_of_month",
    "DashboardSummary",
    "build_dashboard",
    "compute_alerts",
    "FleetError",
    "FormError",
    "IntegrityError",
    "NotFoundError",
    "StoreError",
    "Store",
    "FleetRepository",
]
