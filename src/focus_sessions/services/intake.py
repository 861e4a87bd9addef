"""Intake orchestration for focus sessions."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Protocol
from uuid import uuid4

from focus_sessions.domain.errors import (
    PersistenceError,
    ProcessingError,
    SessionValidationError,
)
from focus_sessions.domain.sessions import MediaStatus, RawSessionInput, SessionRecord
from focus_sessions.services.pipeline import ProcessingPipeline
from focus_sessions.services.validation import validate_session_input

SUCCESS_MESSAGE = "Session created, processed, and saved successfully"
PROCESSING_FAILED_MESSAGE = "Media processing failed"
PERSISTENCE_FAILED_MESSAGE = "Failed to save session to database"
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred while processing the session"

_logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """Persistence interface for processed sessions."""

    def save(self, record: SessionRecord) -> str:
        """Store the record and return the store-assigned id.

        Raises PersistenceError when the record could not be stored.
        """


class IntakeState(StrEnum):
    """States of a single intake request."""

    RECEIVED = "received"
    VALIDATED = "validated"
    PROCESSING = "processing"
    PERSISTED = "persisted"
    REJECTED = "rejected"
    PROCESSING_FAILED = "processing_failed"
    PERSISTENCE_FAILED = "persistence_failed"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class IntakeOutcome:
    """Terminal result of an intake request."""

    state: IntakeState
    message: str
    reason: str | None = None
    session_id: str | None = None
    stored_id: str | None = None
    record: SessionRecord | None = None
    failed_stage: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is IntakeState.PERSISTED


def new_session_id() -> str:
    """Return a process-local correlation id for a session."""
    return f"session_{time.time_ns() // 1_000_000}_{uuid4().hex[:12]}"


@dataclass
class IntakeService:
    """Validates, processes and persists submitted sessions."""

    pipeline: ProcessingPipeline
    store: SessionStore
    id_factory: Callable[[], str] = new_session_id
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(tz=UTC))

    async def submit(self, raw: RawSessionInput) -> IntakeOutcome:
        """Run a raw session through intake and return the terminal outcome."""
        session_id: str | None = None
        try:
            try:
                accepted = validate_session_input(raw)
            except SessionValidationError as exc:
                _logger.info("Rejected session input: %s", exc.rule)
                return IntakeOutcome(
                    state=IntakeState.REJECTED, message=exc.message, reason=exc.rule
                )

            session_id = self.id_factory()
            record = SessionRecord(
                session_id=session_id,
                user_id=accepted.user_id,
                start_time=accepted.start_time,
                end_time=accepted.end_time,
                media=MediaStatus(),
                created_at=self.clock(),
            )
            _logger.info(
                "Processing session %s for user %s", session_id, record.user_id
            )

            try:
                media = await self.pipeline.run(session_id, record.media)
            except ProcessingError as exc:
                _logger.error(
                    "Media processing failed for session %s at stage %s",
                    session_id,
                    exc.stage,
                    exc_info=exc.cause,
                )
                return IntakeOutcome(
                    state=IntakeState.PROCESSING_FAILED,
                    message=PROCESSING_FAILED_MESSAGE,
                    session_id=session_id,
                    record=record.with_media(exc.media),
                    failed_stage=exc.stage,
                )
            record = record.with_media(media)
            _logger.info(
                "Media processing pipeline completed for session %s", session_id
            )

            try:
                stored_id = self._save(record)
            except PersistenceError as exc:
                _logger.error(
                    "Database save failed for session %s",
                    session_id,
                    exc_info=exc,
                )
                return IntakeOutcome(
                    state=IntakeState.PERSISTENCE_FAILED,
                    message=PERSISTENCE_FAILED_MESSAGE,
                    session_id=session_id,
                    record=record,
                )
            _logger.info("Session %s saved with id %s", session_id, stored_id)
            return IntakeOutcome(
                state=IntakeState.PERSISTED,
                message=SUCCESS_MESSAGE,
                session_id=session_id,
                stored_id=stored_id,
                record=record,
            )
        except Exception:
            _logger.exception(
                "Unexpected error in session creation",
                extra={"session_id": session_id},
            )
            return IntakeOutcome(
                state=IntakeState.INTERNAL_ERROR,
                message=INTERNAL_ERROR_MESSAGE,
                session_id=session_id,
            )

    def _save(self, record: SessionRecord) -> str:
        try:
            return self.store.save(record)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError(exc) from exc
