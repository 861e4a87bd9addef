"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from focus_sessions.config import Settings
from focus_sessions.containers import AppContainer
from focus_sessions.domain.sessions import SessionRecord
from focus_sessions.services.intake import IntakeService, SessionStore
from focus_sessions.services.pipeline import (
    COMPRESS_STAGE,
    EXTRACT_AUDIO_STAGE,
    PipelineStage,
    ProcessingPipeline,
    StageWorker,
)

FIXED_NOW = datetime(2024, 1, 1, 12, 0, 5, tzinfo=UTC)


@dataclass
class RecordingWorker:
    """Stage worker that records the sessions it processed."""

    calls: list[str] = field(default_factory=list)

    async def __call__(self, session_id: str) -> None:
        self.calls.append(session_id)


@dataclass
class FailingWorker:
    """Stage worker that always fails."""

    calls: list[str] = field(default_factory=list)
    message: str = "ffmpeg exited with status 1"

    async def __call__(self, session_id: str) -> None:
        self.calls.append(session_id)
        raise RuntimeError(self.message)


@dataclass
class RecordingSessionStore(SessionStore):
    """In-memory session store for tests."""

    saved: list[SessionRecord] = field(default_factory=list)

    def save(self, record: SessionRecord) -> str:
        self.saved.append(record)
        return f"db-{len(self.saved)}"


@dataclass
class FailingSessionStore(SessionStore):
    """Session store that is always unavailable."""

    attempts: list[SessionRecord] = field(default_factory=list)

    def save(self, record: SessionRecord) -> str:
        self.attempts.append(record)
        raise ConnectionError("connection refused")


def build_pipeline(
    compress: StageWorker | None = None, extract_audio: StageWorker | None = None
) -> ProcessingPipeline:
    """Build the two-stage pipeline around the given workers."""
    return ProcessingPipeline(
        [
            PipelineStage(
                name=COMPRESS_STAGE,
                flag="compressed",
                worker=compress or RecordingWorker(),
            ),
            PipelineStage(
                name=EXTRACT_AUDIO_STAGE,
                flag="audio_extracted",
                worker=extract_audio or RecordingWorker(),
            ),
        ]
    )


def build_intake_service(
    pipeline: ProcessingPipeline | None = None, store: SessionStore | None = None
) -> IntakeService:
    """Build an intake service with deterministic ids and clock."""
    return IntakeService(
        pipeline=pipeline or build_pipeline(),
        store=store or RecordingSessionStore(),
        id_factory=lambda: "session_test",
        clock=lambda: FIXED_NOW,
    )


def valid_payload(**overrides: object) -> dict[str, object]:
    """Return a valid request body, with optional field overrides."""
    payload: dict[str, object] = {
        "userId": "alice",
        "startTime": "2024-01-01T10:00:00Z",
        "endTime": "2024-01-01T12:00:00Z",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url=None,
        supabase_service_key=None,
        stage_delay_seconds=0,
    )


@pytest.fixture
def session_store() -> RecordingSessionStore:
    return RecordingSessionStore()


@pytest.fixture
def container(
    settings: Settings, session_store: RecordingSessionStore
) -> AppContainer:
    pipeline = build_pipeline()
    intake_service = build_intake_service(pipeline=pipeline, store=session_store)
    return AppContainer(
        settings=settings,
        session_store=session_store,
        pipeline=pipeline,
        intake_service=intake_service,
    )
