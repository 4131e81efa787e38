"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from study_tracker.api.models import (
    CreateSessionRequest,
    ProblemResponse,
    ScreenshotRequest,
    SessionResponse,
    SessionSummary,
)
from study_tracker.app_logging import configure_logging
from study_tracker.containers import AppContainer
from study_tracker.errors import StudyTrackerError
from study_tracker.tray_menu import tray_menu_items

_ERROR_STATUS = {
    "session_not_found": status.HTTP_404_NOT_FOUND,
    "related_data_not_found": status.HTTP_404_NOT_FOUND,
    "duplicate_session": status.HTTP_409_CONFLICT,
    "no_active_session": status.HTTP_409_CONFLICT,
    "invalid_screenshot": status.HTTP_400_BAD_REQUEST,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(StudyTrackerError)
    async def study_tracker_error(
        request: Request, exc: StudyTrackerError
    ) -> JSONResponse:
        status_code = _ERROR_STATUS.get(
            exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.code, "message": exc.message},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/sessions")
    async def list_sessions(request: Request) -> dict[str, list[SessionResponse]]:
        """Return all saved sessions in creation order."""
        state_container: AppContainer = request.app.state.container
        views = state_container.session_commands.list_sessions()
        return {"sessions": [SessionResponse.from_view(view) for view in views]}

    @app.get("/sessions/active")
    async def active_session(request: Request) -> dict[str, SessionResponse | None]:
        """Return the active session, if any."""
        state_container: AppContainer = request.app.state.container
        view = state_container.session_commands.get_active_session()
        return {"session": SessionResponse.from_view(view) if view else None}

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def create_session(
        payload: CreateSessionRequest, request: Request
    ) -> SessionResponse:
        """Create a session for a folder/course/set and start it."""
        state_container: AppContainer = request.app.state.container
        view = state_container.session_commands.create_and_start_session(
            payload.folder_name, payload.course_name, payload.set_name
        )
        return SessionResponse.from_view(view)

    @app.post("/sessions/end")
    async def end_session(request: Request) -> dict[str, SessionSummary | None]:
        """End the active session."""
        state_container: AppContainer = request.app.state.container
        ended = state_container.session_commands.end_session()
        return {"ended": SessionSummary.from_record(ended) if ended else None}

    @app.post("/sessions/{session_id}/start")
    async def start_session(session_id: UUID, request: Request) -> SessionResponse:
        """Make a saved session the active one."""
        state_container: AppContainer = request.app.state.container
        view = state_container.session_commands.start_session(session_id)
        return SessionResponse.from_view(view)

    @app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_session(session_id: UUID, request: Request) -> Response:
        """Delete a saved session."""
        state_container: AppContainer = request.app.state.container
        state_container.session_commands.delete_session(session_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/screenshots", status_code=status.HTTP_201_CREATED)
    async def save_screenshot(
        payload: ScreenshotRequest, request: Request
    ) -> ProblemResponse:
        """Save a screenshot as a problem in the active session's set."""
        state_container: AppContainer = request.app.state.container
        problem = state_container.screenshot_service.save_screenshot(
            payload.image_base64, payload.problem_name
        )
        return ProblemResponse.from_record(problem)

    @app.get("/tray/menu")
    async def tray_menu() -> dict[str, list[dict[str, str]]]:
        """Return the tray menu items for the desktop shell."""
        return {"items": tray_menu_items()}

    return app
