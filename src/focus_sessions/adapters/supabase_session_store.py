"""Supabase-backed session store."""

from dataclasses import dataclass

from supabase import Client

from focus_sessions.domain.errors import PersistenceError
from focus_sessions.domain.sessions import SessionRecord
from focus_sessions.services.intake import SessionStore


@dataclass
class SupabaseSessionStore(SessionStore):
    """Supabase implementation for processed focus sessions."""

    client: Client
    table: str = "focus_sessions"

    def save(self, record: SessionRecord) -> str:
        """Insert a session row and return its id."""
        document = record.to_document()
        try:
            response = (
                self.client.table(self.table)
                .insert(
                    {
                        "session_id": record.session_id,
                        "user_id": document["userId"],
                        "start_time": document["startTime"],
                        "end_time": document["endTime"],
                        "media": document["media"],
                        "created_at": document["createdAt"],
                    }
                )
                .execute()
            )
        except Exception as exc:
            raise PersistenceError(exc) from exc
        if not response.data:
            raise PersistenceError("Supabase returned no row for the inserted session")
        return str(response.data[0]["id"])
