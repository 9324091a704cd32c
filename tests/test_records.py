#!/usr/bin/env python3
"""Tests for record classes: Vehicle, MaintenanceType, Maintenance, Expense variants."""

import pytest

from fleet import (
    Category,
    Expense,
    FuelExpense,
    Maintenance,
    MaintenanceType,
    User,
    Vehicle,
    make_expense,
)


class TestVehicle:
    """Tests for Vehicle display properties."""

    def test_name_with_brand(self):
        v = Vehicle("ABC1D23", "Onix", 2020, brand="Chevrolet")
        assert v.name == "Chevrolet Onix (2020)"

    def test_name_without_brand(self):
        assert Vehicle("ABC1D23", "Onix", 2020).name == "Onix (2020)"

    def test_label(self):
        assert Vehicle("ABC1D23", "Onix", 2020).label == "ABC1D23 - Onix"

    def test_default_mileage(self):
        assert Vehicle("ABC1D23", "Onix", 2020).current_mileage == 0


class TestUser:
    def test_display_name_falls_back_to_email(self):
        assert User("ana@example.com").display_name == "ana@example.com"
        assert User("ana@example.com", full_name="Ana").display_name == "Ana"


class TestMaintenanceType:
    """Tests for MaintenanceType interval helpers."""

    def test_interval_label_both(self):
        t = MaintenanceType("Oil change", interval_months=6, interval_km=10000)
        assert t.interval_label == "6 mo / 10,000 km"
        assert t.has_interval is True

    def test_interval_label_none(self):
        t = MaintenanceType("Wash")
        assert t.interval_label == "-"
        assert t.has_interval is False


class TestMaintenance:
    def test_is_scheduled(self):
        assert Maintenance("v1", "Oil", "2024-01-01", 1000, next_mileage=11000).is_scheduled
        assert Maintenance("v1", "Oil", "2024-01-01", 1000, next_date="2024-07-01").is_scheduled
        assert not Maintenance("v1", "Oil", "2024-01-01", 1000).is_scheduled


class TestExpenseVariants:
    """Only fuel expenses carry liters."""

    def test_fuel_expense_has_liters(self):
        e = FuelExpense("v1", 250.0, "2024-01-01", liters=50)
        assert e.category is Category.FUEL
        assert e.liters == 50
        assert e.price_per_liter == 5.0

    def test_price_per_liter_without_liters(self):
        assert FuelExpense("v1", 250.0, "2024-01-01").price_per_liter is None

    def test_plain_expense_has_no_liters(self):
        e = Expense("v1", "insurance", 900.0, "2024-01-01")
        assert e.category is Category.INSURANCE
        assert e.liters is None

    def test_plain_expense_rejects_fuel(self):
        with pytest.raises(TypeError):
            Expense("v1", Category.FUEL, 100.0, "2024-01-01")

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            Expense("v1", "tolls", 10.0, "2024-01-01")

    def test_make_expense_picks_fuel_variant(self):
        e = make_expense("v1", "fuel", 100.0, "2024-01-01", liters=20)
        assert isinstance(e, FuelExpense)
        assert e.liters == 20

    def test_make_expense_drops_liters_for_other_categories(self):
        e = make_expense("v1", "maintenance", 100.0, "2024-01-01", liters=20)
        assert not isinstance(e, FuelExpense)
        assert e.liters is None

    def test_category_label(self):
        assert Category.INSURANCE.label == "Insurance"
