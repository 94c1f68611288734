"""Ordered store of the food lines being tracked."""

import math
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from uuid import uuid4

from diet_tracker.domain.foods import ConversionOption, FoodLine, FoodSearchItem
from diet_tracker.services.nutrients import as_number

_UPDATABLE_FIELDS = {
    "food_id",
    "food_name",
    "measurement",
    "quantity",
    "measurement_options",
}


def coerce_quantity(value: object) -> float:
    """Coerce a user-entered quantity to a number, defaulting to 0."""
    number = as_number(value)
    if number is None or math.isnan(number):
        return 0.0
    return number


@dataclass
class FilterStore:
    """Food lines in insertion order, edited by id."""

    _lines: list[FoodLine] = field(default_factory=list)

    def __iter__(self) -> Iterator[FoodLine]:
        return iter(list(self._lines))

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> list[FoodLine]:
        """Return a snapshot of the lines."""
        return list(self._lines)

    def get(self, line_id: str) -> FoodLine | None:
        """Return the line with the given id, if present."""
        for line in self._lines:
            if line.id == line_id:
                return line
        return None

    def add(
        self,
        food: FoodSearchItem,
        options: list[ConversionOption],
        quantity: object = 1,
        option_index: int = 0,
    ) -> FoodLine:
        """Append a line for the food, defaulting to the option at option_index."""
        measurement = None
        if 0 <= option_index < len(options):
            measurement = options[option_index].measure_id
        line = FoodLine(
            id=f"{uuid4().hex}_{food.food_id}",
            food_id=food.food_id,
            food_name=food.description,
            measurement=measurement,
            quantity=coerce_quantity(quantity),
            measurement_options=list(options),
        )
        self._lines.append(line)
        return line

    def update(self, line_id: str, **changes: object) -> FoodLine | None:
        """Merge changes into the line with the given id; no-op when absent."""
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        for index, line in enumerate(self._lines):
            if line.id != line_id:
                continue
            if "quantity" in changes:
                changes["quantity"] = coerce_quantity(changes["quantity"])
            if "measurement_options" in changes:
                changes["measurement_options"] = list(changes["measurement_options"])
            updated = replace(line, **changes)
            if (
                updated.measurement is not None
                and updated.option_for(updated.measurement) is None
            ):
                raise ValueError(
                    f"Measurement {updated.measurement!r} is not offered for "
                    f"{updated.food_name!r}"
                )
            self._lines[index] = updated
            return updated
        return None

    def remove(self, line_id: str) -> None:
        """Delete the line with the given id; no-op when absent."""
        self._lines = [line for line in self._lines if line.id != line_id]

    def replace_all(self, lines: list[FoodLine]) -> None:
        """Replace every line at once."""
        self._lines = list(lines)

    def clear(self) -> None:
        """Drop every line."""
        self._lines = []

    def payload(self) -> dict[str, object]:
        """Build the request body for the aggregation function."""
        food_list = []
        for line in self._lines:
            entry: dict[str, object] = {}
            if line.food_id is not None:
                entry["foodId"] = line.food_id
            if line.measurement is not None:
                entry["measureId"] = line.measurement
            entry["quantity"] = coerce_quantity(line.quantity)
            food_list.append(entry)
        return {"food_list": food_list}
