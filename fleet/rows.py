"""Conversion between store rows and record objects."""

from typing import Any, Dict, Optional

from .errors import StoreError
from .expense import Category, Expense, make_expense
from .maintenance import Maintenance
from .maintenance_type import MaintenanceType
from .user import User
from .vehicle import Vehicle


def user_from_row(row: Dict[str, Any]) -> User:
    return User(
        row["email"],
        row.get("password_hash") or "",
        row.get("full_name"),
        id=row.get("id"),
        created_at=row.get("created_at"),
    )


def vehicle_from_row(row: Dict[str, Any]) -> Vehicle:
    return Vehicle(
        row["plate"],
        row["model"],
        row["year"],
        user_id=row.get("user_id"),
        brand=row.get("brand"),
        color=row.get("color"),
        current_mileage=row.get("current_mileage"),
        id=row.get("id"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def maintenance_type_from_row(row: Dict[str, Any]) -> MaintenanceType:
    return MaintenanceType(
        row["name"],
        row.get("description"),
        row.get("interval_months"),
        row.get("interval_km"),
        id=row.get("id"),
        created_at=row.get("created_at"),
    )


def maintenance_from_row(
    row: Dict[str, Any], vehicle: Optional[Vehicle] = None
) -> Maintenance:
    return Maintenance(
        row["vehicle_id"],
        row["title"],
        row["date"],
        row["mileage"],
        maintenance_type_id=row.get("maintenance_type_id"),
        description=row.get("description"),
        cost=row.get("cost"),
        next_date=row.get("next_date"),
        next_mileage=row.get("next_mileage"),
        id=row.get("id"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        vehicle=vehicle,
    )


def expense_from_row(row: Dict[str, Any], vehicle: Optional[Vehicle] = None) -> Expense:
    try:
        category = Category(row["category"])
    except ValueError:
        raise StoreError(
            f"expenses record {row.get('id')} has unknown category {row['category']!r}"
        )
    return make_expense(
        row["vehicle_id"],
        category,
        row["amount"],
        row["date"],
        description=row.get("description"),
        liters=row.get("liters"),
        id=row.get("id"),
        created_at=row.get("created_at"),
        vehicle=vehicle,
    )


def vehicle_to_row(vehicle: Vehicle) -> Dict[str, Any]:
    """Writable vehicle columns. user_id is set by the repository."""
    return {
        "plate": vehicle.plate,
        "model": vehicle.model,
        "brand": vehicle.brand,
        "year": vehicle.year,
        "color": vehicle.color,
        "current_mileage": vehicle.current_mileage,
    }


def maintenance_type_to_row(mtype: MaintenanceType) -> Dict[str, Any]:
    return {
        "name": mtype.name,
        "description": mtype.description,
        "interval_months": mtype.interval_months,
        "interval_km": mtype.interval_km,
    }


def maintenance_to_row(maintenance: Maintenance) -> Dict[str, Any]:
    return {
        "vehicle_id": maintenance.vehicle_id,
        "maintenance_type_id": maintenance.maintenance_type_id,
        "title": maintenance.title,
        "description": maintenance.description,
        "date": maintenance.date,
        "mileage": maintenance.mileage,
        "cost": maintenance.cost,
        "next_date": maintenance.next_date,
        "next_mileage": maintenance.next_mileage,
    }


def expense_to_row(expense: Expense) -> Dict[str, Any]:
    return {
        "vehicle_id": expense.vehicle_id,
        "category": expense.category.value,
        "amount": expense.amount,
        "date": expense.date,
        "description": expense.description,
        "liters": expense.liters,
    }
