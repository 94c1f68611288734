"""Shared test fixtures."""

from dataclasses import dataclass, field
from uuid import uuid4

import pytest

from diet_tracker.adapters.totals_client import TotalsClient
from diet_tracker.config import Settings
from diet_tracker.containers import AppContainer
from diet_tracker.domain.nutrients import UpstreamResponse
from diet_tracker.domain.saves import SaveEntry, SaveSummary
from diet_tracker.services.foods import (
    ConversionResolver,
    FoodRepository,
    FoodSearchService,
)
from diet_tracker.services.saves import SaveRepository, SaveService
from diet_tracker.services.totals import NutrientFunctionClient, TotalsProxyService
from diet_tracker.services.workspace import DietWorkspace


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food database for tests."""

    foods: list[dict[str, object]] = field(
        default_factory=lambda: [
            {"FoodDescription": "Apple, raw", "FoodID": 101},
            {"FoodDescription": "Apple juice", "FoodID": "102"},
            {"FoodDescription": "Banana", "FoodID": 103},
        ]
    )
    conversions: dict[str, list[dict[str, object]]] = field(
        default_factory=lambda: {
            "101": [
                {"MeasureID": "M1", "ConversionFactorValue": 1.5},
                {"MeasureID": 2, "ConversionFactorValue": "0.25"},
            ],
            "103": [{"MeasureID": "M1", "ConversionFactorValue": None}],
        }
    )
    names: dict[str, str] = field(
        default_factory=lambda: {"M1": "cup", "2": "slice"}
    )
    calls: list[tuple[str, object]] = field(default_factory=list)
    fail_search: bool = False
    fail_conversions: bool = False
    fail_names: bool = False

    def search_foods(self, term: str) -> list[dict[str, object]]:
        self.calls.append(("search_foods", term))
        if self.fail_search:
            raise RuntimeError("search unavailable")
        needle = term.lower()
        return [
            row for row in self.foods if needle in str(row["FoodDescription"]).lower()
        ]

    def get_conversions(self, food_id: str) -> list[dict[str, object]]:
        self.calls.append(("get_conversions", food_id))
        if self.fail_conversions:
            raise RuntimeError("conversions unavailable")
        return list(self.conversions.get(food_id, []))

    def get_measurement_names(self, measure_ids: list[str]) -> list[dict[str, object]]:
        self.calls.append(("get_measurement_names", list(measure_ids)))
        if self.fail_names:
            raise RuntimeError("names unavailable")
        return [
            {"MeasureID": measure_id, "MeasureDescription": self.names[measure_id]}
            for measure_id in measure_ids
            if measure_id in self.names
        ]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


@dataclass
class InMemorySaveRepository(SaveRepository):
    """In-memory save storage keyed like the Supabase tables."""

    saves: dict[str, SaveSummary] = field(default_factory=dict)
    entries: list[SaveEntry] = field(default_factory=list)
    fail_upsert_save: bool = False
    fail_insert_entries: bool = False
    fail_delete_entries: bool = False
    fail_list: bool = False

    def upsert_save(self, save_id: str | None, label: str, owner_id: str | None) -> str:
        if self.fail_upsert_save:
            raise RuntimeError("save table unavailable")
        if save_id is None:
            save_id = str(uuid4())
            self.saves[save_id] = SaveSummary(id=save_id, label=label, owner_id=owner_id)
            return save_id
        current = self.saves[save_id]
        self.saves[save_id] = SaveSummary(
            id=save_id, label=label, owner_id=current.owner_id
        )
        return save_id

    def delete_entries(
        self, save_id: str, keep_line_keys: list[str] | None = None
    ) -> None:
        if self.fail_delete_entries:
            raise RuntimeError("delete failed")
        keep = set(keep_line_keys or [])
        self.entries = [
            entry
            for entry in self.entries
            if entry.save_id != save_id or entry.line_key in keep
        ]

    def insert_entries(self, save_id: str, entries: list[SaveEntry]) -> None:
        if self.fail_insert_entries:
            raise RuntimeError("insert failed")
        for entry in entries:
            self.entries = [
                existing
                for existing in self.entries
                if (existing.save_id, existing.line_key)
                != (entry.save_id, entry.line_key)
            ]
            self.entries.append(entry)

    def list_saves(self, owner_id: str | None) -> list[SaveSummary]:
        if self.fail_list:
            raise RuntimeError("list failed")
        return [
            save
            for save in self.saves.values()
            if owner_id is None or save.owner_id == owner_id
        ]

    def get_save(self, save_id: str) -> SaveSummary | None:
        return self.saves.get(save_id)

    def list_entries(self, save_id: str) -> list[SaveEntry]:
        return sorted(
            (entry for entry in self.entries if entry.save_id == save_id),
            key=lambda entry: entry.position,
        )

    def entries_for(self, save_id: str) -> list[SaveEntry]:
        return self.list_entries(save_id)


@dataclass
class FakeNutrientFunctionClient(NutrientFunctionClient):
    """Fake aggregation function returning a fixed reply."""

    response: UpstreamResponse = field(
        default_factory=lambda: UpstreamResponse(
            status_code=200,
            content_type="application/json",
            content=b'{"nutrsTotals": {"calcium": {"NutrientID": 301, "total": 450}}}',
        )
    )
    error: Exception | None = None
    bodies: list[object] = field(default_factory=list)

    async def invoke(self, body: object) -> UpstreamResponse:
        self.bodies.append(body)
        if self.error is not None:
            raise self.error
        return self.response


@dataclass
class FakeTotalsClient(TotalsClient):
    """Fake totals client returning queued bodies."""

    responses: list[object] = field(default_factory=list)
    payloads: list[dict[str, object]] = field(default_factory=list)
    closed: bool = False

    async def fetch(self, payload: dict[str, object]) -> object:
        self.payloads.append(payload)
        response = self.responses.pop(0) if self.responses else {}
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
    )


@pytest.fixture
def food_repository() -> InMemoryFoodRepository:
    return InMemoryFoodRepository()


@pytest.fixture
def save_repository() -> InMemorySaveRepository:
    return InMemorySaveRepository()


@pytest.fixture
def function_client() -> FakeNutrientFunctionClient:
    return FakeNutrientFunctionClient()


@pytest.fixture
def totals_client() -> FakeTotalsClient:
    return FakeTotalsClient()


@pytest.fixture
def container(
    settings: Settings,
    food_repository: InMemoryFoodRepository,
    save_repository: InMemorySaveRepository,
    function_client: FakeNutrientFunctionClient,
) -> AppContainer:
    resolver = ConversionResolver(food_repository)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        search_service=FoodSearchService(food_repository),
        conversion_resolver=resolver,
        save_service=SaveService(save_repository, resolver),
        totals_proxy=TotalsProxyService(function_client),
        close_resources=close_resources,
    )


@pytest.fixture
def workspace(container: AppContainer, totals_client: FakeTotalsClient) -> DietWorkspace:
    return DietWorkspace(
        search_service=container.search_service,
        resolver=container.conversion_resolver,
        save_service=container.save_service,
        totals_client=totals_client,
        owner_id="owner-1",
    )
