"""Error taxonomy for session intake."""

from focus_sessions.domain.sessions import MediaStatus


class IntakeError(Exception):
    """Base class for typed intake failures."""


class SessionValidationError(IntakeError):
    """Raised when a session input violates a validation rule."""

    def __init__(self, rule: str, message: str) -> None:
        super().__init__(message)
        self.rule = rule
        self.message = message


class ProcessingError(IntakeError):
    """Raised when a pipeline stage fails."""

    def __init__(self, stage: str, cause: Exception, media: MediaStatus) -> None:
        super().__init__(f"Stage {stage} failed: {cause}")
        self.stage = stage
        self.cause = cause
        self.media = media


class PersistenceError(IntakeError):
    """Raised when the session store cannot save a record."""

    def __init__(self, cause: Exception | str) -> None:
        super().__init__(f"Failed to save session: {cause}")
        self.cause = cause
