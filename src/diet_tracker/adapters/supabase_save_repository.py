"""Supabase repository for saves and their entries."""

from dataclasses import dataclass

from supabase import Client

from diet_tracker.domain.saves import SaveEntry, SaveSummary
from diet_tracker.services.saves import SaveRepository

SAVES_TABLE = "saves"
ENTRIES_TABLE = "save_entries"
_ENTRY_COLUMNS = (
    "save_id, food_id, food_description, amount, measure_index, measure_id, "
    "line_key, position"
)


@dataclass
class SupabaseSaveRepository(SaveRepository):
    """Supabase implementation for saves."""

    client: Client

    def upsert_save(self, save_id: str | None, label: str, owner_id: str | None) -> str:
        """Create a save row or update its label, returning the save id."""
        if save_id is None:
            response = (
                self.client.table(SAVES_TABLE)
                .insert({"label": label, "owner_id": owner_id})
                .execute()
            )
            if not response.data:
                raise RuntimeError("Failed to create save")
            return str(response.data[0]["id"])

        response = (
            self.client.table(SAVES_TABLE)
            .update({"label": label})
            .eq("id", save_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to update save {save_id}")
        return str(response.data[0]["id"])

    def delete_entries(
        self, save_id: str, keep_line_keys: list[str] | None = None
    ) -> None:
        """Delete entries of a save that are not in keep_line_keys."""
        query = self.client.table(ENTRIES_TABLE).delete().eq("save_id", save_id)
        if keep_line_keys:
            query = query.not_.in_("line_key", keep_line_keys)
        query.execute()

    def insert_entries(self, save_id: str, entries: list[SaveEntry]) -> None:
        """Upsert entries on (save_id, line_key)."""
        payload = [
            {
                "save_id": save_id,
                "food_id": entry.food_id,
                "food_description": entry.food_description,
                "amount": entry.amount,
                "measure_index": entry.measure_index,
                "measure_id": entry.measure_id,
                "line_key": entry.line_key,
                "position": entry.position,
            }
            for entry in entries
        ]
        if payload:
            self.client.table(ENTRIES_TABLE).upsert(
                payload, on_conflict="save_id,line_key"
            ).execute()

    def list_saves(self, owner_id: str | None) -> list[SaveSummary]:
        """Return saves for an owner ordered by label."""
        query = self.client.table(SAVES_TABLE).select("id, label, owner_id")
        if owner_id is not None:
            query = query.eq("owner_id", owner_id)
        response = query.order("label", desc=False).execute()
        return [_parse_save(row) for row in response.data or []]

    def get_save(self, save_id: str) -> SaveSummary | None:
        """Return a save by id, if present."""
        response = (
            self.client.table(SAVES_TABLE)
            .select("id, label, owner_id")
            .eq("id", save_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_save(response.data[0])

    def list_entries(self, save_id: str) -> list[SaveEntry]:
        """Return entries for a save in position order."""
        response = (
            self.client.table(ENTRIES_TABLE)
            .select(_ENTRY_COLUMNS)
            .eq("save_id", save_id)
            .order("position", desc=False)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _parse_save(row: dict[str, object]) -> SaveSummary:
    owner_id = row.get("owner_id")
    return SaveSummary(
        id=str(row["id"]),
        label=str(row.get("label") or ""),
        owner_id=str(owner_id) if owner_id is not None else None,
    )


def _parse_entry(row: dict[str, object]) -> SaveEntry:
    food_id = row.get("food_id")
    measure_index = row.get("measure_index")
    measure_id = row.get("measure_id")
    return SaveEntry(
        save_id=str(row["save_id"]),
        food_id=str(food_id) if food_id is not None else None,
        food_description=str(row.get("food_description") or ""),
        amount=float(row.get("amount") or 0.0),
        measure_index=int(measure_index) if measure_index is not None else None,
        measure_id=str(measure_id) if measure_id is not None else None,
        line_key=str(row.get("line_key") or ""),
        position=int(row.get("position") or 0),
    )
