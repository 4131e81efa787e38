"""Filing captured screenshots under the active session."""

import base64
import binascii
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from study_tracker.domain.catalog import ProblemRecord
from study_tracker.domain.sessions import ContextNames, utc_now
from study_tracker.errors import InvalidScreenshotError, NoActiveSessionError
from study_tracker.services.catalog import CatalogService
from study_tracker.services.sessions import SessionManager

logger = logging.getLogger(__name__)


class ImageStorage(Protocol):
    """Storage for screenshot image bytes."""

    def save_image(self, names: ContextNames, problem_name: str, data: bytes) -> str:
        """Store image bytes and return the path recorded on the problem."""


def default_problem_name(now: datetime) -> str:
    """Return a filesystem-safe fallback name, e.g. problem-20261019-093000."""
    return now.strftime("problem-%Y%m%d-%H%M%S")


@dataclass
class ScreenshotService:
    """Save screenshots as problems in the active session's set."""

    manager: SessionManager
    catalog: CatalogService
    image_storage: ImageStorage
    clock: Callable[[], datetime] = field(default=utc_now, repr=False)

    def save_screenshot(
        self, image_base64: str, problem_name: str | None = None
    ) -> ProblemRecord:
        """Store the image and create a problem for it."""
        context = self.manager.get_active_session_context()
        if context is None:
            raise NoActiveSessionError()
        names = self.catalog.describe(context)
        data = _decode_image(image_base64)
        name = (problem_name or "").strip() or default_problem_name(self.clock())
        image_path = self.image_storage.save_image(names, name, data)
        problem = self.catalog.add_problem(context.set_id, name, image_path)
        logger.info("Saved screenshot %s to %s", name, image_path)
        return problem


def _decode_image(image_base64: str) -> bytes:
    payload = image_base64.strip()
    # Overlays may send a data URL instead of bare base64.
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise InvalidScreenshotError("Screenshot data is not valid base64") from exc
    if not data:
        raise InvalidScreenshotError("Screenshot data is empty")
    return data
