"""Domain models for focus sessions."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RawSessionInput(BaseModel):
    """Decoded request body, before any validation rule runs."""

    model_config = ConfigDict(frozen=True)

    user_id: Any = Field(default=None, alias="userId")
    start_time: Any = Field(default=None, alias="startTime")
    end_time: Any = Field(default=None, alias="endTime")


@dataclass(frozen=True)
class SessionInput:
    """Normalized session interval accepted by validation."""

    user_id: str
    start_time: datetime
    end_time: datetime


@dataclass(frozen=True)
class MediaStatus:
    """Snapshot of media processing progress."""

    compressed: bool = False
    audio_extracted: bool = False

    def mark_done(self, flag: str) -> "MediaStatus":
        """Return a copy with the given flag set."""
        if flag not in {"compressed", "audio_extracted"}:
            raise ValueError(f"Unknown media flag: {flag}")
        return replace(self, **{flag: True})


@dataclass(frozen=True)
class SessionRecord:
    """A focus session with its processing status."""

    session_id: str
    user_id: str
    start_time: datetime
    end_time: datetime
    media: MediaStatus = field(default_factory=MediaStatus)
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def with_media(self, media: MediaStatus) -> "SessionRecord":
        """Return a copy carrying a new media status."""
        return replace(self, media=media)

    def to_document(self) -> dict[str, object]:
        """Return the JSON-friendly representation of the record."""
        return {
            "userId": self.user_id,
            "startTime": _isoformat(self.start_time),
            "endTime": _isoformat(self.end_time),
            "media": {
                "compressed": self.media.compressed,
                "audioExtracted": self.media.audio_extracted,
            },
            "createdAt": _isoformat(self.created_at),
        }


def _isoformat(value: datetime) -> str:
    """Format an aware datetime as UTC ISO-8601 with a Z suffix."""
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")
