"""Supabase queries against the food database tables."""

from dataclasses import dataclass

from supabase import Client

from diet_tracker.services.foods import FoodRepository

# Table names match the hosted schema, including its spelling.
FOOD_NAME_TABLE = "FoodName"
CONVERSION_FACTOR_TABLE = "ConcersionFactor"
MEASUREMENT_NAME_TABLE = "MeasurementName"


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase-backed food, conversion factor and measurement lookups."""

    client: Client

    def search_foods(self, term: str) -> list[dict[str, object]]:
        """Match descriptions containing the term, ignoring case."""
        response = (
            self.client.table(FOOD_NAME_TABLE)
            .select("FoodDescription,FoodID")
            .ilike("FoodDescription", f"%{term}%")
            .execute()
        )
        return response.data or []

    def get_conversions(self, food_id: str) -> list[dict[str, object]]:
        """Return the conversion factor rows for a food."""
        response = (
            self.client.table(CONVERSION_FACTOR_TABLE)
            .select("MeasureID,ConversionFactorValue")
            .eq("FoodID", food_id)
            .execute()
        )
        return response.data or []

    def get_measurement_names(self, measure_ids: list[str]) -> list[dict[str, object]]:
        """Return measurement descriptions for the given ids."""
        response = (
            self.client.table(MEASUREMENT_NAME_TABLE)
            .select("MeasureID,MeasureDescription")
            .in_("MeasureID", measure_ids)
            .execute()
        )
        return response.data or []
