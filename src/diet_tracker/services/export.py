"""CSV export of nutrient totals and the current food list."""

from collections.abc import Iterable

from diet_tracker.domain.foods import FoodLine
from diet_tracker.domain.nutrients import NutrsTotals
from diet_tracker.services.nutrients import display_text, filter_allowed

CSV_FILENAME = "nutrs_totals.csv"
CSV_MEDIA_TYPE = "text/csv;charset=utf-8"
CSV_FIELDS = (
    "NutrientID",
    "NutrientName",
    "WomanMin",
    "WomanMax",
    "ManMin",
    "ManMax",
    "total",
    "seen_in",
    "highest_value",
    "highest_id",
    "issue_w",
    "issue_m",
)
FILTERS_TITLE = "Selected Filters:"
FILTERS_HEADER = "Food,Quantity,Measurement"


def escape_csv(value: object) -> str:
    """Quote a value, doubling inner quotes; None renders as empty."""
    if value is None:
        return ""
    text = display_text(value).replace('"', '""')
    return f'"{text}"'


def build_csv(totals: NutrsTotals | None, lines: Iterable[FoodLine] = ()) -> str | None:
    """Serialize allow-listed totals and food lines, or None if nothing to export."""
    rows = filter_allowed(totals)
    if not rows:
        return None

    sections = [",".join(CSV_FIELDS)]
    for row in rows:
        sections.append(",".join(escape_csv(_lookup(row, name)) for name in CSV_FIELDS))

    lines = list(lines)
    if lines:
        sections.extend(["", FILTERS_TITLE, FILTERS_HEADER])
        for line in lines:
            sections.append(
                ",".join(
                    [
                        escape_csv(line.food_name or ""),
                        escape_csv(line.quantity),
                        escape_csv(line.measurement_label()),
                    ]
                )
            )
    return "\r\n".join(sections)


def _lookup(row: dict[str, object], name: str) -> object | None:
    value = row.get(name)
    if value is None:
        value = row.get(name.lower())
    return value
