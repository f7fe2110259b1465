"""Supabase repository for food record documents."""

from dataclasses import dataclass

from supabase import Client

from kcalcal.services.records import RecordRepository

TABLE = "food_records"


@dataclass
class SupabaseRecordRepository(RecordRepository):
    """Stores each record as a JSON document under an identity id."""

    client: Client

    def insert(self, document: dict[str, object]) -> int:
        """Insert a document and return the generated id."""
        response = self.client.table(TABLE).insert({"data": document}).execute()
        if not response.data:
            raise RuntimeError("Failed to create food record in Supabase")
        return int(response.data[0]["id"])

    def list_documents(self) -> list[tuple[int, dict[str, object]]]:
        """Return all documents ordered by id."""
        response = (
            self.client.table(TABLE)
            .select("id, data")
            .order("id", desc=False)
            .execute()
        )
        rows = response.data or []
        return [
            (int(row["id"]), row.get("data") or {})
            for row in rows
            if row.get("id") is not None
        ]

    def delete(self, record_id: int) -> None:
        """Delete a document by id."""
        self.client.table(TABLE).delete().eq("id", record_id).execute()
