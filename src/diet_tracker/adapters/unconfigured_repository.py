"""Repository used when the backend settings are absent."""

from dataclasses import dataclass

from diet_tracker.config import MISSING_BACKEND_MESSAGE, MissingSettingsError
from diet_tracker.domain.saves import SaveEntry, SaveSummary


@dataclass
class UnconfiguredDietRepository:
    """Fails every call closed with MissingSettingsError."""

    def search_foods(self, term: str) -> list[dict[str, object]]:
        raise MissingSettingsError(MISSING_BACKEND_MESSAGE)

    def get_conversions(self, food_id: str) -> list[dict[str, object]]:
        raise MissingSettingsError(MISSING_BACKEND_MESSAGE)

    def get_measurement_names(self, measure_ids: list[str]) -> list[dict[str, object]]:
        raise MissingSettingsError(MISSING_BACKEND_MESSAGE)

    def upsert_save(self, save_id: str | None, label: str, owner_id: str | None) -> str:
        raise MissingSettingsError(MISSING_BACKEND_MESSAGE)

    def delete_entries(
        self, save_id: str, keep_line_keys: list[str] | None = None
    ) -> None:
        raise MissingSettingsError(MISSING_BACKEND_MESSAGE)

    def insert_entries(self, save_id: str, entries: list[SaveEntry]) -> None:
        raise MissingSettingsError(MISSING_BACKEND_MESSAGE)

    def list_saves(self, owner_id: str | None) -> list[SaveSummary]:
        raise MissingSettingsError(MISSING_BACKEND_MESSAGE)

    def get_save(self, save_id: str) -> SaveSummary | None:
        raise MissingSettingsError(MISSING_BACKEND_MESSAGE)

    def list_entries(self, save_id: str) -> list[SaveEntry]:
        raise MissingSettingsError(MISSING_BACKEND_MESSAGE)
