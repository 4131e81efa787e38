"""ASGI entrypoint for the study tracker API."""

import logging

from study_tracker.api.app import create_app
from study_tracker.app_logging import configure_logging
from study_tracker.containers import build_container
from study_tracker.errors import DataDirectoryError

try:
    _container = build_container()
except DataDirectoryError as exc:
    configure_logging()
    logging.getLogger(__name__).critical("Cannot start: %s", exc.message)
    raise SystemExit(f"Study Tracker cannot start: {exc.message}") from exc

app = create_app(_container)
