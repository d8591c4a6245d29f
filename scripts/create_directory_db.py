import csv
import sqlite3
from argparse import ArgumentParser
from pathlib import Path
from typing import Mapping, Optional, Tuple

from civicfix.db_connection import SCHEMA_SQL

# -----------------------------
#  column handling
# -----------------------------

CSVRow = Mapping[str, str]

PROFILE_TEXT_COLUMNS = (
    "user_id", "full_name", "role", "phone", "email",
    "city", "state", "district", "pincode", "ward", "area",
)

PROFILE_BOUNDS_COLUMNS = ("geo_north", "geo_south", "geo_east", "geo_west")

TRUTHY = {"1", "true", "yes", "y", "t"}

def get_field(row: CSVRow, name: str) -> Optional[str]:
    raw = row.get(name)
    if not isinstance(raw, str):
        return None

    value = raw.strip()
    return value or None

def parse_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None

def parse_flag(value: Optional[str]) -> int:
    return 1 if value and value.lower() in TRUTHY else 0

def profile_values(row: CSVRow) -> Optional[Tuple]:
    if not get_field(row, "user_id") or not get_field(row, "full_name"):
        return None

    text = [get_field(row, c) for c in PROFILE_TEXT_COLUMNS]
    text[2] = text[2] or "official"

    bounds = [parse_float(get_field(row, c)) for c in PROFILE_BOUNDS_COLUMNS]

    return (*text, parse_flag(get_field(row, "is_verified")), *bounds)

_INSERT_COLUMNS = PROFILE_TEXT_COLUMNS + ("is_verified",) + PROFILE_BOUNDS_COLUMNS

INSERT_PROFILE_SQL = (
    f"INSERT OR REPLACE INTO profiles ({', '.join(_INSERT_COLUMNS)}) "
    f"VALUES ({', '.join('?' for _ in _INSERT_COLUMNS)})"
)

# -----------------------------
#  create db
# -----------------------------

def load_officials(csv_path: Path, db_path: Path, recreate: bool = False) -> int:
    if recreate and db_path.exists():
        db_path.unlink()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    try:
        conn.executescript(SCHEMA_SQL)

        rows_processed = 0
        rows_skipped = 0
        with csv_path.open("r", encoding="utf-8-sig", newline="") as f, conn:
            for row in csv.DictReader(f):
                values = profile_values(row)
                if values is None:
                    rows_skipped += 1
                    continue
                conn.execute(INSERT_PROFILE_SQL, values)
                rows_processed += 1
    finally:
        conn.close()

    print(f"Number of rows processed: {rows_processed} (skipped {rows_skipped})")
    return rows_processed

# -----------------------------
#  entry point
# -----------------------------

def main() -> None:
    parser = ArgumentParser(
        description="Load an officials CSV into the CivicFix profile directory"
    )

    parser.add_argument(
        "csv_file",
        type=Path,
        help="Path to the officials CSV file"
    )

    parser.add_argument(
        "db_file",
        type=Path,
        nargs="?",
        default=None,
        help="Path to the SQLite database (defaults to .db extension)"
    )

    parser.add_argument(
        "--recreate",
        action="store_true",
        help="Delete and recreate the database if it exists"
    )

    args = parser.parse_args()

    if not args.csv_file.exists():
        print(f"Error, CSV file not found: {args.csv_file}")
        raise SystemExit(1)

    db_file = args.db_file or args.csv_file.with_suffix(".db")

    print(f"Loading {args.csv_file} into {db_file}...")
    load_officials(args.csv_file, db_file, recreate=args.recreate)
    print("Done!")

if __name__ == "__main__":
    main()
