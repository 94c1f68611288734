"""Food search and unit-of-measure resolution."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol

from diet_tracker.domain.foods import ConversionOption, FoodSearchItem
from diet_tracker.services.nutrients import as_number, display_text

_logger = logging.getLogger(__name__)


class FoodRepository(Protocol):
    """Read-only access to the food database tables."""

    def search_foods(self, term: str) -> list[dict[str, object]]:
        """Return description/id rows whose description contains the term."""

    def get_conversions(self, food_id: str) -> list[dict[str, object]]:
        """Return measure id/conversion factor rows for a food."""

    def get_measurement_names(self, measure_ids: list[str]) -> list[dict[str, object]]:
        """Return measure id/description rows for the given measure ids."""


@dataclass
class FoodSearchService:
    """Search the food-name table by partial description."""

    repository: FoodRepository

    def search(self, term: str) -> list[FoodSearchItem]:
        """Return foods whose description contains the term, ignoring case."""
        cleaned = term.strip()
        if not cleaned:
            return []
        rows = self.repository.search_foods(cleaned)
        items = []
        for row in rows or []:
            if not isinstance(row, dict):
                continue
            description = row.get("FoodDescription")
            food_id = _as_identifier(row.get("FoodID"))
            if isinstance(description, str) and food_id is not None:
                items.append(FoodSearchItem(description=description, food_id=food_id))
        return items


@dataclass
class ConversionResolver:
    """Join conversion factors with their measurement names."""

    repository: FoodRepository

    def resolve(self, food_id: str) -> list[ConversionOption]:
        """Return the selectable units for a food, never raising."""
        try:
            rows = self.repository.get_conversions(food_id)
        except Exception:
            _logger.exception("Conversion lookup failed for food %s", food_id)
            return []
        rows = [row for row in rows or [] if isinstance(row, dict)]
        if not rows:
            return []

        measure_ids = list(
            dict.fromkeys(
                measure_id
                for measure_id in (_as_identifier(row.get("MeasureID")) for row in rows)
                if measure_id is not None
            )
        )
        labels = self._labels(measure_ids) if measure_ids else {}

        options = []
        for row in rows:
            measure_id = _as_identifier(row.get("MeasureID"))
            if measure_id is None:
                continue
            options.append(
                ConversionOption(
                    measure_id=measure_id,
                    conversion_factor=_as_factor(row.get("ConversionFactorValue")),
                    measure_label=labels.get(measure_id),
                )
            )
        return options

    def _labels(self, measure_ids: list[str]) -> dict[str, str]:
        try:
            rows = self.repository.get_measurement_names(measure_ids)
        except Exception:
            _logger.exception("Measurement name lookup failed for %s", measure_ids)
            return {}
        labels: dict[str, str] = {}
        for row in rows or []:
            if not isinstance(row, dict):
                continue
            measure_id = _as_identifier(row.get("MeasureID"))
            description = row.get("MeasureDescription")
            if measure_id is not None and isinstance(description, str):
                labels[measure_id] = description
        return labels


def _as_identifier(value: object) -> str | None:
    """Stringify string or numeric identifiers; reject anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, int | float):
        return display_text(value)
    return None


def _as_factor(value: object) -> float | None:
    factor = as_number(value)
    if factor is None or math.isnan(factor):
        return None
    return factor
