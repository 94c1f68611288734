"""Tests for food search and conversion resolution."""

from diet_tracker.domain.foods import ConversionOption, FoodSearchItem
from diet_tracker.services.foods import ConversionResolver, FoodSearchService
from tests.conftest import InMemoryFoodRepository


def test_search_matches_case_insensitively_and_stringifies_ids() -> None:
    repository = InMemoryFoodRepository()
    service = FoodSearchService(repository)

    results = service.search("  APPLE ")

    assert results == [
        FoodSearchItem(description="Apple, raw", food_id="101"),
        FoodSearchItem(description="Apple juice", food_id="102"),
    ]
    assert repository.calls == [("search_foods", "APPLE")]


def test_search_blank_term_skips_backend() -> None:
    repository = InMemoryFoodRepository()
    service = FoodSearchService(repository)

    assert service.search("   ") == []
    assert repository.calls == []


def test_search_drops_malformed_rows() -> None:
    repository = InMemoryFoodRepository(
        foods=[
            {"FoodDescription": "Oats", "FoodID": 7},
            {"FoodDescription": "Oat bran", "FoodID": None},
            {"FoodDescription": None, "FoodID": 9},
            {"FoodDescription": "Oat milk", "FoodID": True},
        ]
    )

    results = FoodSearchService(repository).search("oat")

    assert results == [FoodSearchItem(description="Oats", food_id="7")]


def test_resolver_merges_labels_in_conversion_order() -> None:
    repository = InMemoryFoodRepository()

    options = ConversionResolver(repository).resolve("101")

    assert options == [
        ConversionOption(measure_id="M1", conversion_factor=1.5, measure_label="cup"),
        ConversionOption(measure_id="2", conversion_factor=0.25, measure_label="slice"),
    ]
    assert ("get_measurement_names", ["M1", "2"]) in repository.calls


def test_resolver_without_rows_skips_names_query() -> None:
    repository = InMemoryFoodRepository()

    options = ConversionResolver(repository).resolve("999")

    assert options == []
    assert repository.call_names() == ["get_conversions"]


def test_resolver_requests_distinct_ids_and_leaves_unknown_labels_empty() -> None:
    repository = InMemoryFoodRepository(
        conversions={
            "5": [
                {"MeasureID": "M9", "ConversionFactorValue": 2},
                {"MeasureID": "M9", "ConversionFactorValue": 3},
                {"MeasureID": None, "ConversionFactorValue": 1},
                {"MeasureID": {"nested": True}, "ConversionFactorValue": 1},
                {"MeasureID": "M1", "ConversionFactorValue": "n/a"},
            ]
        }
    )

    options = ConversionResolver(repository).resolve("5")

    assert ("get_measurement_names", ["M9", "M1"]) in repository.calls
    assert [option.measure_id for option in options] == ["M9", "M9", "M1"]
    assert options[0].measure_label is None
    assert options[0].conversion_factor == 2.0
    assert options[2].measure_label == "cup"
    assert options[2].conversion_factor is None


def test_resolver_swallows_conversion_failure() -> None:
    repository = InMemoryFoodRepository(fail_conversions=True)

    assert ConversionResolver(repository).resolve("101") == []


def test_resolver_keeps_options_when_names_lookup_fails() -> None:
    repository = InMemoryFoodRepository(fail_names=True)

    options = ConversionResolver(repository).resolve("101")

    assert [option.measure_id for option in options] == ["M1", "2"]
    assert all(option.measure_label is None for option in options)
