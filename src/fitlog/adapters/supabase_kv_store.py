"""Supabase-backed key-value store."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from fitlog.services.storage import KeyValueStore


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Stores each key as one JSON row per owner in a Supabase table."""

    client: Client
    owner_id: str
    table: str = "kv_store"

    def load(self, key: str) -> object | None:
        """Return the stored value for a key."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("owner_id", self.owner_id)
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def save(self, key: str, value: object) -> None:
        """Insert or replace the value for a key."""
        self.client.table(self.table).upsert(
            {
                "owner_id": self.owner_id,
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="owner_id,key",
        ).execute()
