#!/usr/bin/env python3
"""
Admin CLI for the fleet data file.

Commands:
  add-user   - Create a sign-in account
  types      - List maintenance types
  add-type   - Add a maintenance type template
  vehicles   - List a user's vehicles
  dashboard  - Show a user's summary and maintenance alerts
  expenses   - Show a user's expenses with per-category totals
"""

import argparse
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from fleet import (
    Alert,
    Category,
    Expense,
    FleetError,
    FleetRepository,
    MaintenanceType,
    Store,
    Vehicle,
)
from fleet.auth import create_user, find_user
from fleet.rows import maintenance_type_from_row, maintenance_type_to_row

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format distance for display."""
    return f"{km:,.0f}" if km is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format an amount for display."""
    return f"R$ {cost:,.2f}" if cost is not None else "-"


def format_days(days: Optional[int]) -> str:
    """Format remaining days (e.g., '12d' or '-3d')."""
    if days is None:
        return "-"
    return f"{days}d"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def make_alert_table(alerts: List[Alert]) -> List[List[str]]:
    """Convert alerts to table rows."""
    return [
        [
            alert.vehicle_plate,
            alert.maintenance_title,
            alert.next_date or "-",
            format_days(alert.days_remaining),
            format_km(alert.next_mileage),
            format_km(alert.km_remaining),
        ]
        for alert in alerts
    ]


def make_vehicle_table(vehicles: List[Vehicle]) -> List[List[str]]:
    return [
        [
            v.plate,
            v.model,
            v.brand or "-",
            v.year,
            v.color or "-",
            format_km(v.current_mileage),
        ]
        for v in vehicles
    ]


def make_expense_table(expenses: List[Expense]) -> List[List[str]]:
    rows = []
    for e in expenses:
        rows.append(
            [
                e.date,
                e.vehicle.plate if e.vehicle else "-",
                e.category.label,
                format_cost(e.amount),
                f"{e.liters:g}" if e.liters is not None else "-",
                truncate(e.description),
            ]
        )
    return rows


def make_type_table(types: List[MaintenanceType]) -> List[List[str]]:
    return [[t.name, t.interval_label, truncate(t.description, 40)] for t in types]


def _repository(store: Store, email: str) -> Optional[FleetRepository]:
    user = find_user(store, email)
    if user is None:
        print(f"Error: Unknown user '{email}'")
        return None
    return FleetRepository(store, user)


# =============================================================================
# Commands
# =============================================================================


def cmd_add_user(args, store: Store):
    """Create a sign-in account."""
    user = create_user(store, args.email, args.password, args.name)
    print(f"Created user {user.email} ({user.id})")
    return 0


def cmd_types(args, store: Store):
    """List maintenance types."""
    rows = store.table("maintenance_types").order("name").execute()
    types = [maintenance_type_from_row(r) for r in rows]
    print(f"Maintenance types: {len(types)}")
    print()
    print(
        tabulate(
            make_type_table(types),
            headers=["Name", "Interval", "Description"],
            tablefmt="simple",
        )
    )
    return 0


def cmd_add_type(args, store: Store):
    """Add a maintenance type template."""
    mtype = MaintenanceType(
        args.name,
        args.description,
        args.interval_months,
        args.interval_km,
    )
    print("Adding maintenance type:")
    print(f"  Name:     {mtype.name}")
    print(f"  Interval: {mtype.interval_label}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    store.insert("maintenance_types", maintenance_type_to_row(mtype))
    print("Type saved.")
    return 0


def cmd_vehicles(args, store: Store):
    """List a user's vehicles."""
    repo = _repository(store, args.user)
    if repo is None:
        return 1
    vehicles = repo.list_vehicles()
    print(f"User: {repo.user.display_name}")
    print(f"Vehicles: {len(vehicles)}")
    print()
    if vehicles:
        headers = ["Plate", "Model", "Brand", "Year", "Color", "Mileage (km)"]
        print(tabulate(make_vehicle_table(vehicles), headers=headers, tablefmt="simple"))
    return 0


def cmd_dashboard(args, store: Store):
    """Show summary counts, monthly spend and maintenance alerts."""
    repo = _repository(store, args.user)
    if repo is None:
        return 1
    try:
        today = date.fromisoformat(args.today) if args.today else date.today()
    except ValueError:
        print(f"Error: Invalid date '{args.today}' (expected YYYY-MM-DD)")
        return 1
    summary = repo.dashboard(today)

    print(f"User: {repo.user.display_name}")
    print(f"As of: {today.isoformat()}")
    print(f"Vehicles: {summary.total_vehicles}")
    print(f"Maintenances: {summary.upcoming_maintenances}")
    print(f"Spent this month: {format_cost(summary.monthly_expenses)}")
    print(f"Alerts: {summary.pending_alerts}")
    print()

    headers = ["Plate", "Maintenance", "Next date", "Days left", "Next km", "Km left"]
    if summary.alerts:
        print("DUE SOON:")
        print(tabulate(make_alert_table(summary.alerts), headers=headers, tablefmt="simple"))
        print()
    if summary.overdue:
        print("OVERDUE:")
        print(tabulate(make_alert_table(summary.overdue), headers=headers, tablefmt="simple"))
        print()
    return 0


def cmd_expenses(args, store: Store):
    """Show expenses with totals per category."""
    repo = _repository(store, args.user)
    if repo is None:
        return 1
    expenses = repo.list_expenses()
    if args.category:
        expenses = [e for e in expenses if e.category == Category(args.category)]
    totals = repo.expense_totals()

    print(f"User: {repo.user.display_name}")
    print(f"Total: {format_cost(totals.total)}")
    for category in Category:
        print(f"  {category.label + ':':<13}{format_cost(totals[category])}")
    print()

    if not expenses:
        print("No expenses found.")
        return 0

    headers = ["Date", "Vehicle", "Category", "Amount", "Liters", "Description"]
    print(tabulate(make_expense_table(expenses), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Main
# =============================================================================


def main():
    parser = argparse.ArgumentParser(
        description="Fleet data administration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/fleet.yaml add-user ana@example.com secret --name "Ana"
  %(prog)s data/fleet.yaml types
  %(prog)s data/fleet.yaml add-type "Coolant flush" --months 24 --km 40000
  %(prog)s data/fleet.yaml vehicles --user ana@example.com
  %(prog)s data/fleet.yaml dashboard --user ana@example.com
  %(prog)s data/fleet.yaml expenses --user ana@example.com --category fuel
""",
    )
    parser.add_argument(
        "data_file",
        type=Path,
        help="Path to fleet data YAML file",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    add_user_parser = subparsers.add_parser("add-user", help="Create a sign-in account")
    add_user_parser.add_argument("email", type=str, help="Account email")
    add_user_parser.add_argument("password", type=str, help="Account password")
    add_user_parser.add_argument("--name", type=str, help="Full name")

    subparsers.add_parser("types", help="List maintenance types")

    add_type_parser = subparsers.add_parser("add-type", help="Add a maintenance type")
    add_type_parser.add_argument("name", type=str, help="Type name (e.g., 'Oil change')")
    add_type_parser.add_argument("--description", type=str, help="Description")
    add_type_parser.add_argument(
        "--months", dest="interval_months", type=int, help="Interval in months"
    )
    add_type_parser.add_argument(
        "--km", dest="interval_km", type=float, help="Interval in kilometers"
    )
    add_type_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    for name, help_text in [
        ("vehicles", "List a user's vehicles"),
        ("dashboard", "Show summary and maintenance alerts"),
        ("expenses", "Show expenses with category totals"),
    ]:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--user", required=True, type=str, help="Account email")
        if name == "dashboard":
            sub.add_argument(
                "--today", type=str, help="Evaluate as of date (YYYY-MM-DD)"
            )
        if name == "expenses":
            sub.add_argument(
                "--category",
                choices=[c.value for c in Category],
                help="Only list one category",
            )

    args = parser.parse_args()
    store = Store(args.data_file)

    handlers = {
        "add-user": cmd_add_user,
        "types": cmd_types,
        "add-type": cmd_add_type,
        "vehicles": cmd_vehicles,
        "dashboard": cmd_dashboard,
        "expenses": cmd_expenses,
    }

    try:
        return handlers[args.command](args, store)
    except FleetError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
