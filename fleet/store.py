"""
YAML-file relational store.

Holds the users, vehicles, maintenance_types, maintenances and expenses
tables in a single YAML document. Reads go through a small query builder
(select/eq/in_/gte/order); writes enforce required columns, check
constraints, foreign keys and delete rules before the file is rewritten.
"""

import copy
import logging
import math
import threading
import uuid
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

import yaml

from .errors import IntegrityError, NotFoundError, StoreError

logger = logging.getLogger(__name__)

TABLES = ("users", "vehicles", "maintenance_types", "maintenances", "expenses")

REQUIRED_COLUMNS = {
    "users": ("email",),
    "vehicles": ("user_id", "plate", "model", "year"),
    "maintenance_types": ("name",),
    "maintenances": ("vehicle_id", "title", "date", "mileage"),
    "expenses": ("vehicle_id", "category", "amount", "date"),
}

# table -> {column: referenced table}
FOREIGN_KEYS = {
    "vehicles": {"user_id": "users"},
    "maintenances": {
        "vehicle_id": "vehicles",
        "maintenance_type_id": "maintenance_types",
    },
    "expenses": {"vehicle_id": "vehicles"},
}

CASCADE = "cascade"
SET_NULL = "set null"

# referenced table -> [(child table, column, action)]
ON_DELETE = {
    "users": [("vehicles", "user_id", CASCADE)],
    "vehicles": [
        ("maintenances", "vehicle_id", CASCADE),
        ("expenses", "vehicle_id", CASCADE),
    ],
    "maintenance_types": [("maintenances", "maintenance_type_id", SET_NULL)],
}

UNIQUE_COLUMNS = {"users": ("email",)}

EXPENSE_CATEGORIES = ("fuel", "maintenance", "insurance", "other")

DEFAULT_MAINTENANCE_TYPES = [
    {
        "name": "Oil change",
        "description": "Engine oil and filter replacement",
        "interval_months": 6,
        "interval_km": 10000,
    },
    {
        "name": "Tire rotation",
        "description": "Rotate and balance tires",
        "interval_months": None,
        "interval_km": 10000,
    },
    {
        "name": "Brake inspection",
        "description": "Inspect pads, discs and brake fluid",
        "interval_months": 12,
        "interval_km": 20000,
    },
    {
        "name": "Air filter",
        "description": "Engine air filter replacement",
        "interval_months": 12,
        "interval_km": 15000,
    },
    {
        "name": "Timing belt",
        "description": "Timing belt and tensioner replacement",
        "interval_months": 60,
        "interval_km": 60000,
    },
    {
        "name": "Annual inspection",
        "description": "Yearly safety inspection",
        "interval_months": 12,
        "interval_km": None,
    },
]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_constraints(table: str, row: Dict[str, Any]) -> None:
    """Column checks the store enforces regardless of the caller."""
    for column, value in row.items():
        if isinstance(value, float) and not math.isfinite(value):
            raise IntegrityError(f"{table}.{column} must be a finite number")
    if table == "vehicles":
        if not str(row.get("plate") or "").strip():
            raise IntegrityError("vehicles.plate must not be empty")
        mileage = row.get("current_mileage")
        if mileage is not None and mileage < 0:
            raise IntegrityError("vehicles.current_mileage must not be negative")
    elif table == "expenses":
        if row.get("amount") is not None and row["amount"] < 0:
            raise IntegrityError("expenses.amount must not be negative")
        if row.get("category") not in EXPENSE_CATEGORIES:
            raise IntegrityError(f"invalid expense category: {row.get('category')!r}")
        if row.get("category") != "fuel" and row.get("liters") is not None:
            raise IntegrityError("expenses.liters is only allowed for fuel")
    elif table == "maintenances":
        if row.get("mileage") is not None and row["mileage"] < 0:
            raise IntegrityError("maintenances.mileage must not be negative")


def _normalize(value: Any) -> Any:
    """Hand-edited files may hold unquoted YAML dates; keep ISO strings."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


class Query:
    """A filtered, ordered read over one table. Built fluently, run with execute()."""

    def __init__(self, store: "Store", table: str):
        if table not in TABLES:
            raise StoreError(f"unknown table: {table}")
        self._store = store
        self._table = table
        self._columns: Optional[Tuple[str, ...]] = None
        self._filters: List[Callable[[Dict[str, Any]], bool]] = []
        self._order: List[Tuple[str, bool]] = []

    def select(self, *columns: str) -> "Query":
        """Restrict returned columns. No arguments selects every column."""
        self._columns = columns or None
        return self

    def eq(self, column: str, value: Any) -> "Query":
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column: str, values: Iterable[Any]) -> "Query":
        allowed = set(values)
        self._filters.append(lambda row: row.get(column) in allowed)
        return self

    def gte(self, column: str, value: Any) -> "Query":
        value = _normalize(value)
        self._filters.append(
            lambda row: row.get(column) is not None and row[column] >= value
        )
        return self

    def order(self, column: str, desc: bool = False) -> "Query":
        self._order.append((column, desc))
        return self

    def execute(self) -> List[Dict[str, Any]]:
        rows = [
            row
            for row in self._store.rows(self._table)
            if all(f(row) for f in self._filters)
        ]
        # Apply sort keys last-to-first so the first order() call dominates
        for column, desc in reversed(self._order):
            present = [r for r in rows if r.get(column) is not None]
            missing = [r for r in rows if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=desc)
            rows = present + missing
        if self._columns:
            return [{c: row.get(c) for c in self._columns} for row in rows]
        return [dict(row) for row in rows]

    def first(self) -> Optional[Dict[str, Any]]:
        rows = self.execute()
        return rows[0] if rows else None


class Store:
    """A relational store backed by one YAML file."""

    def __init__(self, filename: Union[str, Path]):
        self.filename = Path(filename)
        self._lock = threading.RLock()
        self._seed: Optional[Dict[str, List[Dict[str, Any]]]] = None

    # -- reading -------------------------------------------------------------

    def _empty(self) -> Dict[str, List[Dict[str, Any]]]:
        data: Dict[str, List[Dict[str, Any]]] = {t: [] for t in TABLES}
        created = _now()
        for template in DEFAULT_MAINTENANCE_TYPES:
            data["maintenance_types"].append(
                {"id": str(uuid.uuid4()), **template, "created_at": created}
            )
        return data

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self.filename.exists():
            # Seed ids must stay stable until the first write persists them
            if self._seed is None:
                self._seed = self._empty()
            return copy.deepcopy(self._seed)
        try:
            with open(self.filename, "r") as fp:
                raw = yaml.load(fp, Loader=yaml.SafeLoader) or {}
        except yaml.YAMLError as e:
            raise StoreError(f"cannot read {self.filename}: {e}") from e
        if not isinstance(raw, dict):
            raise StoreError(f"cannot read {self.filename}: not a mapping")

        data = {}
        for table in TABLES:
            data[table] = [
                {k: _normalize(v) for k, v in row.items()}
                for row in (raw.get(table) or [])
            ]
        return data

    def _save(self, data: Dict[str, List[Dict[str, Any]]]) -> None:
        self.filename.parent.mkdir(parents=True, exist_ok=True)
        with open(self.filename, "w") as fp:
            yaml.dump(
                data,
                fp,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
                width=120,
            )

    def rows(self, table: str) -> List[Dict[str, Any]]:
        with self._lock:
            return self._load()[table]

    def table(self, name: str) -> Query:
        """Start a query over a table."""
        return Query(self, name)

    def get(self, table: str, row_id: str) -> Dict[str, Any]:
        row = self.table(table).eq("id", row_id).first()
        if row is None:
            raise NotFoundError(f"{table} record {row_id} not found")
        return row

    # -- writing -------------------------------------------------------------

    def _check_row(
        self, data: Dict[str, List[Dict[str, Any]]], table: str, row: Dict[str, Any]
    ) -> None:
        for column in REQUIRED_COLUMNS[table]:
            value = row.get(column)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise IntegrityError(f"{table}.{column} is required")

        _check_constraints(table, row)

        for column, parent in FOREIGN_KEYS.get(table, {}).items():
            ref = row.get(column)
            if ref is None:
                continue
            if not any(r.get("id") == ref for r in data[parent]):
                raise IntegrityError(
                    f"{table}.{column} references missing {parent} record {ref}"
                )

        for column in UNIQUE_COLUMNS.get(table, ()):
            for other in data[table]:
                if other.get("id") != row.get("id") and other.get(column) == row.get(
                    column
                ):
                    raise IntegrityError(f"{table}.{column} {row[column]!r} already exists")

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a row and return it with its generated id and timestamps."""
        with self._lock:
            data = self._load()
            row = {"id": str(uuid.uuid4())}
            row.update({k: _normalize(v) for k, v in values.items() if k != "id"})
            row["created_at"] = _now()
            if table in ("vehicles", "maintenances"):
                row["updated_at"] = row["created_at"]
            self._check_row(data, table, row)
            data[table].append(row)
            self._save(data)
            logger.debug("inserted %s %s", table, row["id"])
            return dict(row)

    def update(self, table: str, row_id: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """Apply values to one row. Unknown ids raise NotFoundError."""
        with self._lock:
            data = self._load()
            for index, existing in enumerate(data[table]):
                if existing.get("id") == row_id:
                    break
            else:
                raise NotFoundError(f"{table} record {row_id} not found")

            row = dict(existing)
            row.update(
                {
                    k: _normalize(v)
                    for k, v in values.items()
                    if k not in ("id", "created_at")
                }
            )
            if table in ("vehicles", "maintenances"):
                row["updated_at"] = _now()
            self._check_row(data, table, row)
            data[table][index] = row
            self._save(data)
            logger.debug("updated %s %s", table, row_id)
            return dict(row)

    def _delete_rows(
        self, data: Dict[str, List[Dict[str, Any]]], table: str, ids: set
    ) -> None:
        data[table] = [r for r in data[table] if r.get("id") not in ids]
        for child, column, action in ON_DELETE.get(table, []):
            affected = [r for r in data[child] if r.get(column) in ids]
            if not affected:
                continue
            if action == CASCADE:
                logger.info(
                    "cascading delete of %d %s rows from %s", len(affected), child, table
                )
                self._delete_rows(data, child, {r["id"] for r in affected})
            elif action == SET_NULL:
                for r in affected:
                    r[column] = None

    def delete(self, table: str, row_id: str) -> None:
        """Delete a row, cascading or nulling references per ON_DELETE."""
        with self._lock:
            data = self._load()
            if not any(r.get("id") == row_id for r in data[table]):
                raise NotFoundError(f"{table} record {row_id} not found")
            self._delete_rows(data, table, {row_id})
            self._save(data)
            logger.debug("deleted %s %s", table, row_id)
