#!/usr/bin/env python3
"""Tests for the Flask screens, driven through the test client."""

from datetime import date, timedelta

import pytest
import yaml

from fleet import (
    Category,
    Expense,
    FleetRepository,
    FuelExpense,
    Maintenance,
    MaintenanceType,
    Store,
    StoreError,
    Vehicle,
)
from web.app import app, format_currency, format_date, format_km


@pytest.fixture
def client(store, user):
    app.config.update(TESTING=True, FLEET_DATA_FILE=str(store.filename))
    with app.test_client() as client:
        yield client


@pytest.fixture
def signed_in(client):
    response = client.post(
        "/login", data={"email": "ana@example.com", "password": "secret"}
    )
    assert response.status_code == 302
    return client


@pytest.fixture
def car(repo):
    return repo.create_vehicle(Vehicle("ABC1D23", "Onix", 2020, current_mileage=49500))


class TestFilters:
    def test_format_km(self):
        assert format_km(50000) == "50,000 km"
        assert format_km(None) == "—"

    def test_format_currency(self):
        assert format_currency(1234.5) == "R$ 1,234.50"
        assert format_currency(99.999) == "R$ 100.00"

    def test_format_date(self):
        assert format_date("2024-07-15") == "15/07/2024"
        assert format_date("") == "—"
        assert format_date("soon") == "soon"


class TestAuth:
    """Sign-in, sign-up and redirects for signed-out visitors."""

    @pytest.mark.parametrize("path", ["/", "/vehicles", "/maintenances", "/expenses"])
    def test_signed_out_redirects_to_login(self, client, path):
        response = client.get(path)
        assert response.status_code == 302
        assert "/login" in response.headers["Location"]

    def test_signed_out_post_does_not_write(self, client, store):
        before = store.filename.read_text()
        response = client.post(
            "/vehicles/new", data={"plate": "ABC1D23", "model": "Onix", "year": "2020"}
        )
        assert response.status_code == 302
        assert store.filename.read_text() == before

    def test_login_page(self, client):
        response = client.get("/login")
        assert response.status_code == 200
        assert b'name="password"' in response.data

    def test_bad_password(self, client):
        response = client.post(
            "/login", data={"email": "ana@example.com", "password": "nope"}
        )
        assert response.status_code == 401
        assert b"Invalid email or password" in response.data

    def test_login_follows_local_next(self, client):
        response = client.post(
            "/login?next=/expenses",
            data={"email": "ana@example.com", "password": "secret"},
        )
        assert response.headers["Location"].endswith("/expenses")

    def test_login_ignores_external_next(self, client):
        response = client.post(
            "/login?next=//evil.example.com/",
            data={"email": "ana@example.com", "password": "secret"},
        )
        assert "evil" not in response.headers["Location"]

    def test_logout(self, signed_in):
        signed_in.get("/logout")
        assert signed_in.get("/").status_code == 302

    def test_register(self, client):
        response = client.post(
            "/register",
            data={"email": "bruno@example.com", "password": "pw", "full_name": "Bruno"},
            follow_redirects=True,
        )
        assert response.status_code == 200
        assert b"Account created" in response.data
        assert b"Bruno" in response.data

    def test_register_duplicate(self, client):
        response = client.post(
            "/register", data={"email": "ana@example.com", "password": "pw"}
        )
        assert response.status_code == 400
        assert b"already exists" in response.data


class TestDashboard:
    def test_empty(self, signed_in):
        response = signed_in.get("/")
        assert response.status_code == 200
        assert b"Dashboard" in response.data
        assert b"R$ 0.00" in response.data

    def test_alerts_and_monthly_total(self, signed_in, repo, car):
        today = date.today()
        repo.create_maintenance(
            Maintenance(
                car.id,
                "Oil change",
                today.isoformat(),
                49000,
                next_date=(today + timedelta(days=10)).isoformat(),
            )
        )
        repo.create_maintenance(
            Maintenance(car.id, "Brake pads", today.isoformat(), 40000, next_mileage=45000)
        )
        repo.create_expense(Expense(car.id, Category.OTHER, 99.999, today.isoformat()))

        response = signed_in.get("/")
        assert b"Upcoming maintenances" in response.data
        assert b"Oil change" in response.data
        assert b"Overdue maintenances" in response.data
        assert b"Brake pads" in response.data
        assert b"R$ 100.00" in response.data


class TestVehicles:
    def test_create(self, signed_in, repo):
        response = signed_in.post(
            "/vehicles/new",
            data={"plate": "abc1d23", "model": "Onix", "year": "2020", "current_mileage": "100"},
            follow_redirects=True,
        )
        assert b"Vehicle ABC1D23 registered" in response.data
        (vehicle,) = repo.list_vehicles()
        assert vehicle.plate == "ABC1D23"
        assert vehicle.current_mileage == 100

    def test_empty_plate_never_reaches_store(self, signed_in, repo, monkeypatch):
        calls = []
        original = Store.insert

        def spy(self, table, values):
            calls.append(table)
            return original(self, table, values)

        monkeypatch.setattr(Store, "insert", spy)
        response = signed_in.post(
            "/vehicles/new",
            data={"plate": "", "model": "Onix", "year": "2020"},
            follow_redirects=True,
        )
        assert b"Plate is required" in response.data
        assert calls == []
        assert repo.list_vehicles() == []

    def test_edit_form_prefilled(self, signed_in, car):
        response = signed_in.get(f"/vehicles?edit={car.id}")
        assert b'value="Onix"' in response.data
        assert b"Edit Onix (2020)" in response.data

    def test_update(self, signed_in, repo, car):
        signed_in.post(
            f"/vehicles/{car.id}/edit",
            data={"plate": "ABC1D23", "model": "Onix", "year": "2020", "current_mileage": "51000"},
        )
        assert repo.get_vehicle(car.id).current_mileage == 51000

    def test_delete_cascades(self, signed_in, repo, car):
        repo.create_expense(Expense(car.id, Category.OTHER, 10, "2024-01-01"))
        response = signed_in.post(f"/vehicles/{car.id}/delete", follow_redirects=True)
        assert b"Vehicle deleted" in response.data
        assert repo.list_vehicles() == []
        assert repo.list_expenses() == []

    def test_delete_unknown(self, signed_in):
        response = signed_in.post("/vehicles/missing/delete", follow_redirects=True)
        assert b"Could not delete vehicle" in response.data


class TestMaintenances:
    def test_list(self, signed_in, repo, car):
        repo.create_maintenance(Maintenance(car.id, "Oil change", "2024-01-15", 50000))
        response = signed_in.get("/maintenances")
        assert response.status_code == 200
        assert b"Oil change" in response.data
        assert b'id="maintenance-form"' in response.data

    def test_form_partial_projects_next_due(self, signed_in, repo, car):
        oil = next(t for t in repo.list_maintenance_types() if t.name == "Oil change")
        response = signed_in.get(
            "/maintenances/form",
            query_string={
                "vehicle_id": car.id,
                "maintenance_type_id": oil.id,
                "date": "2024-01-15",
                "mileage": "50000",
            },
        )
        assert response.status_code == 200
        assert b"<html" not in response.data
        assert b'value="2024-07-15"' in response.data
        assert b'value="60000"' in response.data
        assert b'value="Oil change"' in response.data

    def test_form_partial_keeps_editing_id(self, signed_in, repo, car):
        m = repo.create_maintenance(Maintenance(car.id, "Oil", "2024-01-15", 1))
        response = signed_in.get(
            "/maintenances/form", query_string={"editing_id": m.id, "date": "2024-01-15"}
        )
        assert f"/maintenances/{m.id}/edit".encode() in response.data

    def test_type_options_show_intervals(self, signed_in, repo):
        repo.create_maintenance_type(MaintenanceType("Wash"))
        response = signed_in.get("/maintenances")
        assert b">Wash</option>" in response.data
        assert b"Oil change (6 mo / 10,000 km)" in response.data

    def test_form_partial_store_error(self, signed_in, monkeypatch):
        def broken(self):
            raise StoreError("cannot read fleet.yaml")

        monkeypatch.setattr(FleetRepository, "list_maintenance_types", broken)
        response = signed_in.get("/maintenances/form", query_string={"date": "2024-01-15"})
        assert response.status_code == 200
        assert b'id="maintenance-form"' in response.data

    def test_create(self, signed_in, repo, car):
        response = signed_in.post(
            "/maintenances/new",
            data={
                "vehicle_id": car.id,
                "title": "Oil change",
                "date": "2024-01-15",
                "mileage": "50000",
                "next_mileage": "60000",
            },
            follow_redirects=True,
        )
        assert b"Maintenance registered: Oil change" in response.data
        (m,) = repo.list_maintenances()
        assert m.next_mileage == 60000

    def test_create_missing_date(self, signed_in, repo, car):
        response = signed_in.post(
            "/maintenances/new",
            data={"vehicle_id": car.id, "title": "Oil", "mileage": "1"},
            follow_redirects=True,
        )
        assert b"Date is required" in response.data
        assert repo.list_maintenances() == []

    def test_edit_and_delete(self, signed_in, repo, car):
        m = repo.create_maintenance(Maintenance(car.id, "Oil", "2024-01-15", 1))
        assert b'value="Oil"' in signed_in.get(f"/maintenances?edit={m.id}").data
        signed_in.post(
            f"/maintenances/{m.id}/edit",
            data={"vehicle_id": car.id, "title": "Oil + filter", "date": "2024-01-15", "mileage": "1"},
        )
        assert repo.get_maintenance(m.id).title == "Oil + filter"
        signed_in.post(f"/maintenances/{m.id}/delete")
        assert repo.list_maintenances() == []


class TestExpenses:
    def test_totals_page(self, signed_in, repo, car):
        repo.create_expense(Expense(car.id, Category.INSURANCE, 900, "2024-01-01"))
        response = signed_in.get("/expenses")
        assert response.status_code == 200
        assert b"R$ 900.00" in response.data
        assert b"Insurance" in response.data

    def test_create_drops_liters_for_non_fuel(self, signed_in, repo, car):
        signed_in.post(
            "/expenses/new",
            data={
                "vehicle_id": car.id,
                "category": "other",
                "amount": "15",
                "date": "2024-01-01",
                "liters": "20",
            },
        )
        (expense,) = repo.list_expenses()
        assert expense.liters is None
        assert repo.store.rows("expenses")[0]["liters"] is None

    def test_create_fuel(self, signed_in, repo, car):
        response = signed_in.post(
            "/expenses/new",
            data={
                "vehicle_id": car.id,
                "category": "fuel",
                "amount": "250",
                "date": "2024-01-01",
                "liters": "40",
            },
            follow_redirects=True,
        )
        assert b"Expense registered" in response.data
        assert repo.list_expenses()[0].liters == 40

    def test_update_and_delete(self, signed_in, repo, car):
        e = repo.create_expense(Expense(car.id, Category.OTHER, 10, "2024-01-01"))
        signed_in.post(
            f"/expenses/{e.id}/edit",
            data={"vehicle_id": car.id, "category": "maintenance", "amount": "12", "date": "2024-01-02"},
        )
        assert repo.get_expense(e.id).category is Category.MAINTENANCE
        signed_in.post(f"/expenses/{e.id}/delete")
        assert repo.list_expenses() == []

    def test_price_per_liter_shown(self, signed_in, repo, car):
        repo.create_expense(FuelExpense(car.id, 250, "2024-01-01", liters=40))
        response = signed_in.get("/expenses")
        assert "40 L · R$ 6.25/L".encode() in response.data

    def test_unknown_category_in_file(self, signed_in, store, car):
        data = yaml.safe_load(store.filename.read_text())
        data["expenses"] = [
            {"id": "e1", "vehicle_id": car.id, "category": "tolls", "amount": 5, "date": "2024-01-01"}
        ]
        store.filename.write_text(yaml.dump(data))
        response = signed_in.get("/expenses")
        assert response.status_code == 200
        assert b"Could not load expenses" in response.data
