"""Dependency container wiring for the application."""

import logging
from dataclasses import dataclass

from supabase import create_client

from focus_sessions.adapters.memory_session_store import InMemorySessionStore
from focus_sessions.adapters.supabase_session_store import SupabaseSessionStore
from focus_sessions.config import Settings
from focus_sessions.services.intake import IntakeService, SessionStore
from focus_sessions.services.pipeline import ProcessingPipeline, default_stages

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_store: SessionStore
    pipeline: ProcessingPipeline
    intake_service: IntakeService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    session_store = _build_session_store(resolved_settings)
    pipeline = ProcessingPipeline(default_stages(resolved_settings.stage_delay_seconds))
    intake_service = IntakeService(pipeline=pipeline, store=session_store)
    return AppContainer(
        settings=resolved_settings,
        session_store=session_store,
        pipeline=pipeline,
        intake_service=intake_service,
    )


def _build_session_store(settings: Settings) -> SessionStore:
    if not settings.supabase_configured:
        _logger.warning("Supabase is not configured; sessions are kept in memory")
        return InMemorySessionStore()
    supabase_client = create_client(
        settings.supabase_url, settings.supabase_service_key
    )
    _logger.info("Using Supabase table %s for sessions", settings.sessions_table)
    return SupabaseSessionStore(supabase_client, table=settings.sessions_table)
