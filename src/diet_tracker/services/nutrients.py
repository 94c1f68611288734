"""Helpers for reading and presenting nutrient rows."""

import math
import re

from diet_tracker.domain.nutrients import NutrientRow, NutrsTotals

# Nutrients shown to the user and exported; the rest are computed upstream
# but hidden.
ALLOWED_NUTRIENT_IDS = frozenset(
    {
        416, 301, 205, 208, 204, 814, 831, 825, 291, 303, 304, 315, 410, 305, 306,
        203, 319, 405, 317, 307, 404, 406, 418, 415, 401, 324, 430, 309, 815, 323,
        605, 606,
    }
)  # fmt: skip

_SNAKE_SEGMENT = re.compile(r"_([a-z])")


def display_text(value: object) -> str:
    """Render a scalar the way the browser page printed it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


def as_number(value: object) -> float | None:
    """Coerce a loosely-typed identifier or amount to a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    text = str(value).strip()
    if "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def is_allowed(row: object) -> bool:
    """Return true when the row's NutrientID is allow-listed."""
    if not isinstance(row, dict):
        return False
    return as_number(row.get("NutrientID")) in ALLOWED_NUTRIENT_IDS


def filter_allowed(totals: NutrsTotals | None) -> list[NutrientRow]:
    """Return allow-listed rows in the mapping's order."""
    if not totals:
        return []
    return [row for row in totals.values() if is_allowed(row)]


def read_field(row: object, key: str) -> object | None:
    """Look a field up by exact, lowercased, then camelCased key."""
    if not isinstance(row, dict):
        return None
    for candidate in (key, key.lower(), _camel_case(key)):
        value = row.get(candidate)
        if value is not None:
            return value
    return None


def format_issues(row: NutrientRow) -> str | None:
    """Summarize the deficiency/excess flags for women and men."""
    parts = []
    for prefix, key in (("w", "issue_w"), ("m", "issue_m")):
        value = read_field(row, key)
        if value is not None and display_text(value).strip():
            parts.append(f"{prefix}:{display_text(value)}")
    return " | ".join(parts) if parts else None


def display_lines(totals: NutrsTotals | None) -> list[str]:
    """Format allow-listed totals as one line per nutrient."""
    lines = []
    for key, row in (totals or {}).items():
        if not is_allowed(row):
            continue
        name = row.get("NutrientName")
        total = row.get("total")
        line = (
            f"{key}: {'' if name is None else display_text(name)} : "
            f"{'' if total is None else display_text(total)}"
        )
        issues = format_issues(row)
        if issues:
            line = f"{line} [{issues}]"
        lines.append(line)
    return lines


def _camel_case(key: str) -> str:
    return _SNAKE_SEGMENT.sub(lambda match: match.group(1).upper(), key)
