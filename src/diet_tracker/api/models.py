"""Pydantic models for the diet API payloads."""

from typing import Any

from pydantic import BaseModel, Field

from diet_tracker.domain.foods import ConversionOption, FoodLine
from diet_tracker.domain.saves import DEFAULT_SAVE_LABEL
from diet_tracker.services.filters import coerce_quantity


class ConversionOptionModel(BaseModel):
    """Selectable unit of measure."""

    measure_id: str
    conversion_factor: float | None = None
    measure_label: str | None = None


class FoodLineModel(BaseModel):
    """One food line as sent by the page."""

    id: str
    food_name: str = ""
    food_id: str | None = None
    measurement: str | None = None
    quantity: Any = 0
    measurement_options: list[ConversionOptionModel] = Field(default_factory=list)

    def to_domain(self) -> FoodLine:
        """Convert to the domain food line."""
        return FoodLine(
            id=self.id,
            food_name=self.food_name,
            food_id=self.food_id,
            measurement=self.measurement,
            quantity=coerce_quantity(self.quantity),
            measurement_options=[
                ConversionOption(
                    measure_id=option.measure_id,
                    conversion_factor=option.conversion_factor,
                    measure_label=option.measure_label,
                )
                for option in self.measurement_options
            ],
        )


class SaveRequest(BaseModel):
    """Request to persist a food list."""

    save_id: str | None = None
    label: str = DEFAULT_SAVE_LABEL
    owner_id: str | None = None
    lines: list[FoodLineModel] = Field(default_factory=list)


class CsvExportRequest(BaseModel):
    """Totals, in any accepted response shape, plus the food lines to export."""

    totals: dict[str, Any] | None = None
    lines: list[FoodLineModel] = Field(default_factory=list)
