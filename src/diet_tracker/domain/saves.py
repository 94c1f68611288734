"""Domain models for persisted food lists."""

from dataclasses import dataclass

from diet_tracker.domain.foods import FoodLine

DEFAULT_SAVE_LABEL = "Untitled diet"


@dataclass(frozen=True)
class SaveSummary:
    """Header row of a persisted food list."""

    id: str
    label: str
    owner_id: str | None = None


@dataclass(frozen=True)
class SaveEntry:
    """One persisted line of a save."""

    save_id: str
    food_id: str | None
    food_description: str
    amount: float
    measure_index: int | None
    measure_id: str | None
    line_key: str
    position: int


@dataclass(frozen=True)
class SaveBinding:
    """Which save, if any, the current food list is bound to."""

    save_id: str | None = None

    @property
    def is_saved(self) -> bool:
        """Return true when bound to a persisted save."""
        return self.save_id is not None


UNSAVED = SaveBinding()


@dataclass(frozen=True)
class LoadedSave:
    """A save reconstructed into food lines."""

    save_id: str
    label: str
    lines: list[FoodLine]
