"""CSV loader — reads and normalizes user and engineer seed files."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from fieldservice.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    normalize_specialization,
    parse_availability,
    parse_bool,
)

logger = logging.getLogger(__name__)


def _sniff_dialect(sample: str) -> type[csv.Dialect]:
    """Pick the delimiter (comma/semicolon/tab) that dominates the header line."""
    if not sample:
        return csv.excel

    first_line = sample.splitlines()[0]
    counts = {d: first_line.count(d) for d in (";", ",", "\t")}
    best_delim = max(counts, key=counts.get)

    if counts[best_delim] > 0:
        class DynamicDialect(csv.excel):
            delimiter = best_delim
        return DynamicDialect
    return csv.excel


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str | None]]:
    """Read a CSV file with BOM handling and column normalization.

    Args:
        file_path: path to the CSV file.
        encoding: file encoding (utf-8-sig strips BOM automatically).

    Returns:
        List of dicts with normalized column names.
    """
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        reader = csv.DictReader(f, dialect=_sniff_dialect(sample))
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {col: normalize_column_name(col) for col in reader.fieldnames}
        rows = [
            {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            for raw_row in reader
        ]

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def load_users(file_path: Path) -> list[dict]:
    """Load the users CSV.

    Expected columns: email, name, phone, address, pincode
    """
    users = []
    for row in _read_csv(file_path):
        email = (row.get("email") or "").lower()
        if not email:
            logger.warning("Skipping user row without email: %s", row)
            continue
        users.append({
            "email": email,
            "name": row.get("name") or "",
            "phone": row.get("phone") or row.get("phone_number"),
            "address": row.get("address"),
            "pincode": row.get("pincode") or row.get("postal_code"),
        })
    logger.info("Parsed %d users", len(users))
    return users


def load_engineers(file_path: Path) -> list[dict]:
    """Load the engineers CSV.

    Expected columns: email, name, phone, specialization, availability,
    address, pincode, latitude, longitude, approved
    """
    engineers = []
    for row in _read_csv(file_path):
        email = (row.get("email") or "").lower()
        specialization = normalize_specialization(row.get("specialization"))
        if not email or specialization is None:
            logger.warning("Skipping engineer row without email/specialization: %s", row)
            continue
        engineers.append({
            "email": email,
            "name": row.get("name") or "",
            "phone": row.get("phone") or row.get("phone_number"),
            "specialization": specialization,
            "availability": parse_availability(row.get("availability")),
            "address": row.get("address"),
            "pincode": row.get("pincode") or row.get("postal_code"),
            "latitude": _parse_float(row.get("latitude") or row.get("lat")),
            "longitude": _parse_float(row.get("longitude") or row.get("lon") or row.get("long")),
            "is_engineer": parse_bool(row.get("approved") or row.get("is_engineer")),
        })
    logger.info("Parsed %d engineers", len(engineers))
    return engineers


def _parse_float(value: str | None) -> float | None:
    """Safely parse a float from a string."""
    if not value:
        return None
    try:
        return float(value.replace(",", ".").strip())
    except (ValueError, AttributeError):
        return None
