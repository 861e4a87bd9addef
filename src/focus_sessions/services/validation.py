"""Validation rules for incoming focus sessions."""

from datetime import UTC, datetime, timedelta

from focus_sessions.domain.errors import SessionValidationError
from focus_sessions.domain.sessions import RawSessionInput, SessionInput

MAX_SESSION_DURATION = timedelta(hours=8)

MISSING_FIELDS = "missing_fields"
INVALID_USER_ID = "invalid_user_id"
INVALID_START_TIME = "invalid_start_time"
INVALID_END_TIME = "invalid_end_time"
END_BEFORE_START = "end_before_start"
DURATION_EXCEEDED = "duration_exceeded"
MALFORMED_BODY = "malformed_body"

RULE_MESSAGES: dict[str, str] = {
    MISSING_FIELDS: "Missing required fields: userId, startTime, endTime",
    INVALID_USER_ID: "userId must be a non-empty string",
    INVALID_START_TIME: "startTime must be a valid date",
    INVALID_END_TIME: "endTime must be a valid date",
    END_BEFORE_START: "endTime must be after startTime",
    DURATION_EXCEEDED: "Session duration cannot exceed 8 hours",
    MALFORMED_BODY: "Request body must be a JSON object",
}


def validation_error(rule: str) -> SessionValidationError:
    """Build the validation error for a rule code."""
    return SessionValidationError(rule, RULE_MESSAGES[rule])


def validate_session_input(raw: RawSessionInput) -> SessionInput:
    """Check a raw session against the intake rules.

    Rules run in a fixed order and the first violation is raised; errors are
    never aggregated.
    """
    if (
        raw.user_id is None
        or _is_missing_time(raw.start_time)
        or _is_missing_time(raw.end_time)
    ):
        raise validation_error(MISSING_FIELDS)

    if not isinstance(raw.user_id, str) or not raw.user_id.strip():
        raise validation_error(INVALID_USER_ID)

    start_time = parse_timestamp(raw.start_time)
    if start_time is None:
        raise validation_error(INVALID_START_TIME)

    end_time = parse_timestamp(raw.end_time)
    if end_time is None:
        raise validation_error(INVALID_END_TIME)

    if end_time <= start_time:
        raise validation_error(END_BEFORE_START)

    if end_time - start_time > MAX_SESSION_DURATION:
        raise validation_error(DURATION_EXCEEDED)

    return SessionInput(
        user_id=raw.user_id.strip(),
        start_time=start_time,
        end_time=end_time,
    )


def parse_timestamp(value: object) -> datetime | None:
    """Parse ISO-8601 text or epoch milliseconds into an aware datetime."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    if cleaned.endswith(("Z", "z")):
        cleaned = f"{cleaned[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(cleaned)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=UTC)
        return parsed.astimezone(UTC)
    except (OverflowError, ValueError):
        return None


def _is_missing_time(value: object) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    return isinstance(value, int | float) and value == 0
