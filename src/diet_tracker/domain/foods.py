"""Domain models for the food database and the current food list."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FoodSearchItem:
    """A food returned by a name search."""

    description: str
    food_id: str


@dataclass(frozen=True)
class ConversionOption:
    """A selectable unit of measure for a food."""

    measure_id: str
    conversion_factor: float | None = None
    measure_label: str | None = None


@dataclass(frozen=True)
class FoodLine:
    """One row of the user's current food list."""

    id: str
    food_name: str
    food_id: str | None = None
    measurement: str | None = None
    quantity: float = 0
    measurement_options: list[ConversionOption] = field(default_factory=list)

    def option_for(self, measure_id: str | None) -> ConversionOption | None:
        """Return the option with the given measure id, if offered."""
        for option in self.measurement_options:
            if option.measure_id == measure_id:
                return option
        return None

    def measurement_label(self) -> str:
        """Return the chosen unit's label, falling back to its raw id."""
        option = self.option_for(self.measurement)
        if option is not None and option.measure_label is not None:
            return option.measure_label
        return self.measurement or ""

    def measurement_index(self) -> int | None:
        """Return the position of the chosen unit in the option list."""
        for index, option in enumerate(self.measurement_options):
            if option.measure_id == self.measurement:
                return index
        return None
