"""ASGI entrypoint for the focus sessions API."""

from focus_sessions.api.app import create_app
from focus_sessions.containers import build_container

app = create_app(build_container())
