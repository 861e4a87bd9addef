"""Process-local session store."""

from dataclasses import dataclass, field
from uuid import uuid4

from focus_sessions.domain.sessions import SessionRecord
from focus_sessions.services.intake import SessionStore


@dataclass
class InMemorySessionStore(SessionStore):
    """Keeps saved sessions in memory; contents are lost on restart."""

    documents: dict[str, dict[str, object]] = field(default_factory=dict)

    def save(self, record: SessionRecord) -> str:
        """Store the record document under a new id."""
        stored_id = str(uuid4())
        self.documents[stored_id] = {
            "sessionId": record.session_id,
            **record.to_document(),
        }
        return stored_id
