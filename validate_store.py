#!/usr/bin/env python3
"""
Check fleet data files before they are served.

Each file is validated against schema.yaml, then checked for the relational
rules the store enforces on write: foreign keys must point at existing rows
and unique columns must not repeat. Hand-edited files can break either.
"""
import sys
from pathlib import Path
from typing import Any, Dict, List

import yaml
from jsonschema import Draft202012Validator

from fleet.store import FOREIGN_KEYS, TABLES, UNIQUE_COLUMNS


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def schema_errors(data: Any, schema: dict) -> List[str]:
    """Every schema violation, ordered by location in the document."""
    errors = []
    validator = Draft202012Validator(schema)
    for error in sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.path))):
        errors.append(f"Schema validation error: {error.message}")
        if error.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in error.path)}")
    return errors


def reference_errors(data: Dict[str, List[Dict[str, Any]]]) -> List[str]:
    """Dangling foreign keys, repeated ids and repeated unique values."""
    errors = []
    ids = {table: set() for table in TABLES}

    for table in TABLES:
        for index, row in enumerate(data.get(table) or []):
            if row["id"] in ids[table]:
                errors.append(f"Duplicate id: {table}.{index} {row['id']!r}")
            ids[table].add(row["id"])

    for table, columns in UNIQUE_COLUMNS.items():
        for column in columns:
            seen = set()
            for index, row in enumerate(data.get(table) or []):
                value = row.get(column)
                if value in seen:
                    errors.append(f"Duplicate value: {table}.{index}.{column} {value!r}")
                seen.add(value)

    for table, references in FOREIGN_KEYS.items():
        for index, row in enumerate(data.get(table) or []):
            for column, parent in references.items():
                ref = row.get(column)
                if ref is not None and ref not in ids[parent]:
                    errors.append(
                        f"Missing reference: {table}.{index}.{column} -> {parent} {ref!r}"
                    )
    return errors


def validate_data_file(filepath: Path, schema: dict) -> List[str]:
    """Validate a single fleet data file. Returns list of errors."""
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return [f"YAML parse error: {e}"]
    except OSError as e:
        return [f"Error: {e}"]

    errors = schema_errors(data, schema)
    if errors:
        # Reference checks assume well-formed rows
        return errors
    return reference_errors(data)


def main(argv=None):
    """Validate the given data files, or every YAML file in data/."""
    schema = load_schema()
    paths = [Path(p) for p in (argv if argv is not None else sys.argv[1:])]

    if not paths:
        data_dir = Path(__file__).parent / "data"
        if not data_dir.exists():
            print(f"Error: data directory not found: {data_dir}")
            return 1
        paths = sorted(list(data_dir.glob("*.yaml")) + list(data_dir.glob("*.yml")))

    if not paths:
        print("Warning: No YAML files found")
        return 0

    failed = 0
    for filepath in paths:
        errors = validate_data_file(filepath, schema)
        if errors:
            failed += 1
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
        else:
            print(f"OK: {filepath.name}")

    if failed:
        print(f"\n{failed} of {len(paths)} file(s) failed validation")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
