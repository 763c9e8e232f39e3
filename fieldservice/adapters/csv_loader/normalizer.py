"""CSV value normalization — column names, weekdays, specializations."""

from __future__ import annotations

import re

from fieldservice.domain.value_objects.enums import WEEKDAYS

_WEEKDAY_BY_PREFIX = {day[:3].lower(): day for day in WEEKDAYS}


def normalize_column_name(name: str) -> str:
    """Normalize a CSV column name.

    - Removes BOM characters (\\ufeff)
    - Replaces runs of whitespace with a single underscore
    - Lowercases and drops anything that is not a word character
    """
    name = name.replace("﻿", "").strip()
    name = re.sub(r"[\s ]+", "_", name)
    name = name.lower()
    return re.sub(r"[^\w]", "", name, flags=re.UNICODE)


def clean_string(value: str | None) -> str | None:
    """Strip whitespace and return None for empty strings."""
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def normalize_weekday(raw: str | None) -> str | None:
    """Map 'mon', 'MONDAY', 'Mon.' to the canonical 'Monday'; None if unknown."""
    if not raw:
        return None
    key = re.sub(r"[^a-z]", "", raw.strip().lower())[:3]
    return _WEEKDAY_BY_PREFIX.get(key)


def parse_availability(raw: str | None) -> set[str]:
    """Parse 'Monday; Wed, fri' into {'Monday', 'Wednesday', 'Friday'}.

    Unknown tokens are dropped.
    """
    if not raw:
        return set()
    parts = re.split(r"[,;|\s]+", raw.strip())
    return {day for day in (normalize_weekday(p) for p in parts) if day}


def normalize_specialization(raw: str | None) -> str | None:
    """'installation ' -> 'Installation'; None if empty."""
    value = clean_string(raw)
    return value.capitalize() if value else None


def parse_bool(raw: str | None) -> bool:
    return (raw or "").strip().lower() in {"1", "true", "yes", "y", "approved"}
