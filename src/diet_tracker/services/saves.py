"""Persistence of named food lists."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from diet_tracker.domain.foods import ConversionOption, FoodLine
from diet_tracker.domain.saves import LoadedSave, SaveBinding, SaveEntry, SaveSummary
from diet_tracker.services.filters import coerce_quantity
from diet_tracker.services.foods import ConversionResolver

_logger = logging.getLogger(__name__)


class SaveRepository(Protocol):
    """Persistence interface for saves and their entries."""

    def upsert_save(self, save_id: str | None, label: str, owner_id: str | None) -> str:
        """Insert a save (save_id None) or relabel an existing one; return its id."""

    def delete_entries(
        self, save_id: str, keep_line_keys: list[str] | None = None
    ) -> None:
        """Delete a save's entries, except those whose line key is kept."""

    def insert_entries(self, save_id: str, entries: list[SaveEntry]) -> None:
        """Write entries, replacing rows with the same save id and line key."""

    def list_saves(self, owner_id: str | None) -> list[SaveSummary]:
        """Return saves belonging to the owner."""

    def get_save(self, save_id: str) -> SaveSummary | None:
        """Return a save header by id, if present."""

    def list_entries(self, save_id: str) -> list[SaveEntry]:
        """Return a save's entries ordered by position."""


@dataclass
class SaveService:
    """Save and reload food lists."""

    repository: SaveRepository
    resolver: ConversionResolver

    def save(
        self,
        binding: SaveBinding,
        label: str,
        owner_id: str | None,
        lines: list[FoodLine],
    ) -> SaveBinding:
        """Persist the lines under the binding's save, creating it if unsaved.

        Entries are written before stale ones are removed, so a failed write
        leaves the previous entries in place.
        """
        save_id = self.repository.upsert_save(binding.save_id, label, owner_id)
        entries = [
            SaveEntry(
                save_id=save_id,
                food_id=line.food_id,
                food_description=line.food_name,
                amount=coerce_quantity(line.quantity),
                measure_index=line.measurement_index(),
                measure_id=line.measurement,
                line_key=line.id,
                position=position,
            )
            for position, line in enumerate(lines)
        ]
        try:
            if entries:
                self.repository.insert_entries(save_id, entries)
        except Exception:
            _logger.exception("Failed to write entries for save %s", save_id)
            return SaveBinding(save_id=save_id)
        try:
            self.repository.delete_entries(
                save_id, keep_line_keys=[entry.line_key for entry in entries]
            )
        except Exception:
            _logger.exception("Failed to remove stale entries for save %s", save_id)
        return SaveBinding(save_id=save_id)

    def load(self, save_id: str) -> LoadedSave | None:
        """Rebuild a save's lines with freshly resolved units."""
        try:
            save = self.repository.get_save(save_id)
            if save is None:
                _logger.warning("Save %s not found", save_id)
                return None
            entries = self.repository.list_entries(save_id)
        except Exception:
            _logger.exception("Failed to load save %s", save_id)
            return None
        return LoadedSave(
            save_id=save.id,
            label=save.label,
            lines=[self._restore(entry) for entry in entries],
        )

    def list_saves(self, owner_id: str | None) -> list[SaveSummary]:
        """Return the owner's saves, or an empty list on failure."""
        try:
            return self.repository.list_saves(owner_id)
        except Exception:
            _logger.exception("Failed to list saves for %s", owner_id)
            return []

    def _restore(self, entry: SaveEntry) -> FoodLine:
        options = self.resolver.resolve(entry.food_id) if entry.food_id else []
        return FoodLine(
            id=entry.line_key or f"{uuid4().hex}_{entry.food_id}",
            food_id=entry.food_id,
            food_name=entry.food_description,
            measurement=_pick_measurement(entry, options),
            quantity=coerce_quantity(entry.amount),
            measurement_options=options,
        )


def _pick_measurement(
    entry: SaveEntry, options: list[ConversionOption]
) -> str | None:
    """Prefer the stored measure id; fall back to the stored position."""
    if entry.measure_id is not None:
        for option in options:
            if option.measure_id == entry.measure_id:
                return option.measure_id
    if entry.measure_index is not None and 0 <= entry.measure_index < len(options):
        return options[entry.measure_index].measure_id
    return None
