"""Page model for assembling a food list and reviewing its nutrient totals.

The workspace holds what the diet page shows: search results, the food
lines, the latest totals, an error banner and the save the lines are bound
to. Each totals refresh takes a generation number when it starts; a reply
that arrives after a newer refresh has started is dropped.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from diet_tracker.adapters.totals_client import TotalsClient
from diet_tracker.domain.foods import FoodLine, FoodSearchItem
from diet_tracker.domain.nutrients import NutrsTotals
from diet_tracker.domain.saves import (
    DEFAULT_SAVE_LABEL,
    UNSAVED,
    SaveBinding,
    SaveSummary,
)
from diet_tracker.services.export import build_csv
from diet_tracker.services.filters import FilterStore
from diet_tracker.services.foods import ConversionResolver, FoodSearchService
from diet_tracker.services.nutrients import display_lines, filter_allowed
from diet_tracker.services.saves import SaveService
from diet_tracker.services.totals import totals_or_none

_logger = logging.getLogger(__name__)


def extract_error_message(error: object) -> str:
    """Return a user-facing message for an arbitrary error value."""
    if not error:
        return "Unknown error"
    if isinstance(error, str):
        return error
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return str(error)


@dataclass
class DietWorkspace:
    """State and actions of the diet page."""

    search_service: FoodSearchService
    resolver: ConversionResolver
    save_service: SaveService
    totals_client: TotalsClient
    owner_id: str | None = None
    filters: FilterStore = field(default_factory=FilterStore)
    totals: NutrsTotals | None = None
    error: str | None = None
    search_term: str = ""
    search_results: list[FoodSearchItem] = field(default_factory=list)
    search_loading: bool = False
    binding: SaveBinding = UNSAVED
    label: str = DEFAULT_SAVE_LABEL
    saves: list[SaveSummary] = field(default_factory=list)
    _totals_generation: int = field(default=0, repr=False)

    async def start(self) -> None:
        """Load the initial totals and the saves list independently."""
        await asyncio.gather(self.refresh_totals(), self.refresh_saves())

    async def search(self, term: str | None = None) -> None:
        """Search foods by description; blank terms do nothing."""
        if term is not None:
            self.search_term = term
        cleaned = self.search_term.strip()
        if not cleaned:
            return
        self.search_loading = True
        self.search_results = []
        self.error = None
        try:
            self.search_results = self.search_service.search(cleaned)
        except Exception as exc:
            _logger.exception("Food search failed for %r", cleaned)
            self.error = extract_error_message(exc)
        finally:
            self.search_loading = False

    async def select_food(self, item: FoodSearchItem) -> FoodLine:
        """Add a line for a search result with its first unit and quantity 1."""
        options = self.resolver.resolve(item.food_id)
        line = self.filters.add(item, options)
        self.search_results = []
        self.search_term = ""
        return line

    def update_line(self, line_id: str, **changes: object) -> FoodLine | None:
        """Edit a line's quantity or unit."""
        return self.filters.update(line_id, **changes)

    def remove_line(self, line_id: str) -> None:
        """Remove a line from the list."""
        self.filters.remove(line_id)

    async def refresh_totals(self) -> None:
        """Send the food list for aggregation and replace the totals."""
        self._totals_generation += 1
        generation = self._totals_generation
        self.error = None
        try:
            body = await self.totals_client.fetch(self.filters.payload())
        except Exception as exc:
            _logger.exception("Totals fetch failed")
            if generation == self._totals_generation:
                self.error = extract_error_message(exc)
            return
        if generation == self._totals_generation:
            self.totals = totals_or_none(body)

    async def refresh_saves(self) -> None:
        """Reload the owner's saves list."""
        self.saves = self.save_service.list_saves(self.owner_id)

    def rename(self, label: str) -> None:
        """Change the label used for the next save."""
        self.label = label

    async def save(self) -> None:
        """Persist the current lines, creating a save when unsaved."""
        try:
            binding = self.save_service.save(
                self.binding, self.label, self.owner_id, self.filters.lines
            )
        except Exception as exc:
            _logger.exception("Failed to save %r", self.label)
            self.error = extract_error_message(exc)
            return
        self.binding = binding
        await self.refresh_saves()

    async def load(self, save_id: str) -> bool:
        """Replace the lines with a save's lines, discarding unsaved edits."""
        loaded = self.save_service.load(save_id)
        if loaded is None:
            return False
        self.filters.replace_all(loaded.lines)
        self.binding = SaveBinding(save_id=loaded.save_id)
        self.label = loaded.label
        return True

    def select_unsaved(self) -> None:
        """Unbind from any save and start an empty list."""
        self.filters.clear()
        self.binding = UNSAVED
        self.label = DEFAULT_SAVE_LABEL

    async def select_save(self, save_id: str | None) -> bool:
        """Load a save, or unbind when the unsaved option is chosen."""
        if save_id is None:
            self.select_unsaved()
            return True
        return await self.load(save_id)

    def visible_nutrients(self) -> list[str]:
        """Return the allow-listed totals formatted for display."""
        return display_lines(self.totals)

    @property
    def can_download(self) -> bool:
        """Return true when there is at least one exportable nutrient."""
        return bool(filter_allowed(self.totals))

    def export_csv(self) -> str | None:
        """Return the CSV document, or None when there is nothing to export."""
        return build_csv(self.totals, self.filters.lines)

    async def close(self) -> None:
        """Release the totals client."""
        await self.totals_client.close()
