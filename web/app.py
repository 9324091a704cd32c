"""Flask web application for vehicle fleet management."""

import os
from datetime import date
from functools import wraps
from pathlib import Path

from flask import Flask, flash, g, redirect, render_template, request, session, url_for

# Add parent directory to path for fleet imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from fleet import Category, FleetError, FleetRepository, Status, Store
from fleet.auth import authenticate, create_user, get_user
from fleet.forms import (
    MaintenanceForm,
    parse_expense_form,
    parse_maintenance_form,
    parse_vehicle_form,
)

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")

# Path to the data file (relative to project root)
app.config["FLEET_DATA_FILE"] = os.environ.get(
    "FLEET_DATA_FILE", str(Path(__file__).parent.parent / "data" / "fleet.yaml")
)

_stores = {}


def get_store() -> Store:
    """One Store per data file, so writes share its lock."""
    path = Path(app.config["FLEET_DATA_FILE"])
    store = _stores.get(path)
    if store is None:
        store = _stores[path] = Store(path)
    return store


def format_km(km):
    """Format distance with comma separator."""
    if km is None:
        return "—"
    return f"{km:,.0f} km"


def format_currency(amount):
    """Format an amount rounded to cents for display."""
    if amount is None:
        return "—"
    return f"R$ {amount:,.2f}"


def format_date(date_str):
    """Format ISO date as DD/MM/YYYY."""
    if not date_str:
        return "—"
    try:
        return date.fromisoformat(date_str).strftime("%d/%m/%Y")
    except ValueError:
        return date_str


def status_color(status: Status) -> str:
    """Get Tailwind color classes for status."""
    colors = {
        Status.OVERDUE: "bg-red-100 text-red-800 border-red-200",
        Status.DUE_SOON: "bg-yellow-100 text-yellow-800 border-yellow-200",
        Status.OK: "bg-green-100 text-green-800 border-green-200",
        Status.UNKNOWN: "bg-purple-100 text-purple-800 border-purple-200",
    }
    return colors.get(status, "bg-gray-100 text-gray-800")


# Register template filters
app.jinja_env.filters["format_km"] = format_km
app.jinja_env.filters["format_currency"] = format_currency
app.jinja_env.filters["format_date"] = format_date
app.jinja_env.filters["status_color"] = status_color


def login_required(view):
    """Redirect to sign-in without a session; otherwise expose g.repo for the user."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        user = get_user(get_store(), session.get("user_id"))
        if user is None:
            session.clear()
            return redirect(url_for("login", next=request.path))
        g.user = user
        g.repo = FleetRepository(get_store(), user)
        return view(*args, **kwargs)

    return wrapped


def report_error(message: str, error: FleetError) -> None:
    """Log a failed call and show it once as a flash message."""
    app.logger.warning("%s: %s", message, error)
    flash(f"{message}: {error}", "error")


# =============================================================================
# Auth
# =============================================================================


@app.route("/login", methods=["GET", "POST"])
def login():
    """Sign-in page."""
    if request.method == "POST":
        email = request.form.get("email", "")
        user = authenticate(get_store(), email, request.form.get("password", ""))
        if user is None:
            app.logger.info("failed sign-in for %s", email)
            flash("Invalid email or password", "error")
            return render_template("login.html", email=email), 401
        session.clear()
        session["user_id"] = user.id
        next_url = request.args.get("next") or ""
        # Only follow local paths
        if not next_url.startswith("/") or next_url.startswith("//"):
            next_url = url_for("index")
        return redirect(next_url)
    return render_template("login.html", email="")


@app.route("/register", methods=["GET", "POST"])
def register():
    """Account creation page."""
    if request.method == "POST":
        try:
            user = create_user(
                get_store(),
                request.form.get("email", ""),
                request.form.get("password", ""),
                request.form.get("full_name") or None,
            )
        except FleetError as e:
            flash(str(e), "error")
            return render_template("register.html"), 400
        session.clear()
        session["user_id"] = user.id
        flash("Account created", "success")
        return redirect(url_for("index"))
    return render_template("register.html")


@app.route("/logout")
def logout():
    """Sign out and return to the sign-in page."""
    session.clear()
    return redirect(url_for("login"))


# =============================================================================
# Dashboard
# =============================================================================


@app.route("/")
@login_required
def index():
    """Dashboard with summary counts, monthly spend and due-soon alerts."""
    try:
        summary = g.repo.dashboard(date.today())
    except FleetError as e:
        report_error("Could not load dashboard", e)
        summary = None

    return render_template("dashboard.html", summary=summary, active_tab="dashboard")


# =============================================================================
# Vehicles
# =============================================================================


@app.route("/vehicles")
@login_required
def vehicles():
    """Vehicle registry, with the edit form filled when ?edit=<id> is given."""
    vehicle_list = []
    editing = None
    try:
        vehicle_list = g.repo.list_vehicles()
        edit_id = request.args.get("edit")
        if edit_id:
            editing = g.repo.get_vehicle(edit_id)
    except FleetError as e:
        report_error("Could not load vehicles", e)

    return render_template(
        "vehicles.html",
        vehicles=vehicle_list,
        editing=editing,
        active_tab="vehicles",
    )


@app.route("/vehicles/new", methods=["POST"])
@login_required
def create_vehicle():
    try:
        vehicle = g.repo.create_vehicle(parse_vehicle_form(request.form))
        flash(f"Vehicle {vehicle.plate} registered", "success")
    except FleetError as e:
        report_error("Could not save vehicle", e)
    return redirect(url_for("vehicles"))


@app.route("/vehicles/<vehicle_id>/edit", methods=["POST"])
@login_required
def update_vehicle(vehicle_id: str):
    try:
        vehicle = g.repo.update_vehicle(vehicle_id, parse_vehicle_form(request.form))
        flash(f"Vehicle {vehicle.plate} updated", "success")
    except FleetError as e:
        report_error("Could not update vehicle", e)
    return redirect(url_for("vehicles"))


@app.route("/vehicles/<vehicle_id>/delete", methods=["POST"])
@login_required
def delete_vehicle(vehicle_id: str):
    try:
        g.repo.delete_vehicle(vehicle_id)
        flash("Vehicle deleted", "success")
    except FleetError as e:
        report_error("Could not delete vehicle", e)
    return redirect(url_for("vehicles"))


# =============================================================================
# Maintenances
# =============================================================================


def render_maintenance_form(form: MaintenanceForm, editing_id=None, **context):
    return render_template(
        "partials/maintenance_form.html",
        form=form,
        editing_id=editing_id,
        **context,
    )


@app.route("/maintenances")
@login_required
def maintenances():
    """Maintenance history and planning."""
    maintenance_list = []
    vehicle_list = []
    types = []
    form = MaintenanceForm.blank(date.today())
    editing_id = None
    try:
        maintenance_list = g.repo.list_maintenances()
        vehicle_list = g.repo.list_vehicles()
        types = g.repo.list_maintenance_types()
        edit_id = request.args.get("edit")
        if edit_id:
            form = MaintenanceForm.from_maintenance(g.repo.get_maintenance(edit_id))
            editing_id = edit_id
    except FleetError as e:
        report_error("Could not load maintenances", e)

    return render_template(
        "maintenances.html",
        maintenances=maintenance_list,
        vehicles=vehicle_list,
        types=types,
        form=form,
        editing_id=editing_id,
        active_tab="maintenances",
    )


@app.route("/maintenances/form")
@login_required
def maintenance_form_partial():
    """HTMX partial: maintenance form re-rendered after a type is picked."""
    form = MaintenanceForm.from_request(request.args)
    vehicle_list = []
    types = []
    try:
        vehicle_list = g.repo.list_vehicles()
        types = g.repo.list_maintenance_types()
        if form.maintenance_type_id:
            form.apply_type(g.repo.get_maintenance_type(form.maintenance_type_id))
    except FleetError as e:
        report_error("Could not load maintenance form", e)

    return render_maintenance_form(
        form,
        editing_id=request.args.get("editing_id") or None,
        vehicles=vehicle_list,
        types=types,
    )


@app.route("/maintenances/new", methods=["POST"])
@login_required
def create_maintenance():
    try:
        maintenance = g.repo.create_maintenance(parse_maintenance_form(request.form))
        flash(f"Maintenance registered: {maintenance.title}", "success")
    except FleetError as e:
        report_error("Could not save maintenance", e)
    return redirect(url_for("maintenances"))


@app.route("/maintenances/<maintenance_id>/edit", methods=["POST"])
@login_required
def update_maintenance(maintenance_id: str):
    try:
        maintenance = g.repo.update_maintenance(
            maintenance_id, parse_maintenance_form(request.form)
        )
        flash(f"Maintenance updated: {maintenance.title}", "success")
    except FleetError as e:
        report_error("Could not update maintenance", e)
    return redirect(url_for("maintenances"))


@app.route("/maintenances/<maintenance_id>/delete", methods=["POST"])
@login_required
def delete_maintenance(maintenance_id: str):
    try:
        g.repo.delete_maintenance(maintenance_id)
        flash("Maintenance deleted", "success")
    except FleetError as e:
        report_error("Could not delete maintenance", e)
    return redirect(url_for("maintenances"))


# =============================================================================
# Expenses
# =============================================================================


@app.route("/expenses")
@login_required
def expenses():
    """Expense registry with totals per category."""
    expense_list = []
    vehicle_list = []
    totals = None
    editing = None
    try:
        expense_list = g.repo.list_expenses()
        vehicle_list = g.repo.list_vehicles()
        totals = g.repo.expense_totals()
        edit_id = request.args.get("edit")
        if edit_id:
            editing = g.repo.get_expense(edit_id)
    except FleetError as e:
        report_error("Could not load expenses", e)

    return render_template(
        "expenses.html",
        expenses=expense_list,
        vehicles=vehicle_list,
        totals=totals,
        editing=editing,
        categories=list(Category),
        today=date.today().isoformat(),
        active_tab="expenses",
    )


@app.route("/expenses/new", methods=["POST"])
@login_required
def create_expense():
    try:
        g.repo.create_expense(parse_expense_form(request.form))
        flash("Expense registered", "success")
    except FleetError as e:
        report_error("Could not save expense", e)
    return redirect(url_for("expenses"))


@app.route("/expenses/<expense_id>/edit", methods=["POST"])
@login_required
def update_expense(expense_id: str):
    try:
        g.repo.update_expense(expense_id, parse_expense_form(request.form))
        flash("Expense updated", "success")
    except FleetError as e:
        report_error("Could not update expense", e)
    return redirect(url_for("expenses"))


@app.route("/expenses/<expense_id>/delete", methods=["POST"])
@login_required
def delete_expense(expense_id: str):
    try:
        g.repo.delete_expense(expense_id)
        flash("Expense deleted", "success")
    except FleetError as e:
        report_error("Could not delete expense", e)
    return redirect(url_for("expenses"))


if __name__ == "__main__":
    # Run with debug mode for development
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
