"""FastAPI application factory."""

import logging

from fastapi import Body, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from focus_sessions.app_logging import configure_logging
from focus_sessions.containers import AppContainer
from focus_sessions.domain.sessions import RawSessionInput
from focus_sessions.services.intake import IntakeOutcome, IntakeState
from focus_sessions.services.validation import MALFORMED_BODY, RULE_MESSAGES

_STATUS_CODES = {
    IntakeState.PERSISTED: status.HTTP_201_CREATED,
    IntakeState.REJECTED: status.HTTP_400_BAD_REQUEST,
    IntakeState.PROCESSING_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    IntakeState.PERSISTENCE_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    IntakeState.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.exception_handler(RequestValidationError)
    async def malformed_body(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info(
            "Malformed request body on %s %s", request.method, request.url.path
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": RULE_MESSAGES[MALFORMED_BODY], "reason": MALFORMED_BODY},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code in {
            status.HTTP_404_NOT_FOUND,
            status.HTTP_405_METHOD_NOT_ALLOWED,
        }:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={
                    "error": "Not found",
                    "message": f"Route {request.method} {request.url.path} not found",
                },
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "message": "Something went wrong on the server",
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/sessions")
    async def create_session(
        request: Request, payload: RawSessionInput | None = Body(default=None)
    ) -> JSONResponse:
        """Validate, process and store a focus session."""
        state_container: AppContainer = request.app.state.container
        outcome = await state_container.intake_service.submit(
            payload or RawSessionInput()
        )
        return JSONResponse(
            status_code=_STATUS_CODES[outcome.state],
            content=_outcome_payload(outcome),
        )

    return app


def _outcome_payload(outcome: IntakeOutcome) -> dict[str, object]:
    """Build the response body for an intake outcome."""
    if outcome.state is IntakeState.PERSISTED:
        return {
            "message": outcome.message,
            "sessionId": outcome.session_id,
            "databaseId": outcome.stored_id,
            "sessionData": _record_payload(outcome),
        }
    if outcome.state is IntakeState.REJECTED:
        return {"error": outcome.message, "reason": outcome.reason}
    if outcome.state is IntakeState.INTERNAL_ERROR:
        return {"error": "Internal server error", "message": outcome.message}
    payload: dict[str, object] = {
        "error": outcome.message,
        "sessionId": outcome.session_id,
        "sessionData": _record_payload(outcome),
    }
    if outcome.failed_stage:
        payload["stage"] = outcome.failed_stage
    return payload


def _record_payload(outcome: IntakeOutcome) -> dict[str, object] | None:
    if outcome.record is None:
        return None
    return outcome.record.to_document()
