"""Tests for screenshot filing."""

import base64
import re
from datetime import UTC, datetime

import pytest

from study_tracker.containers import AppContainer
from study_tracker.errors import (
    InvalidScreenshotError,
    NoActiveSessionError,
    RelatedDataNotFoundError,
)
from study_tracker.services.screenshots import ScreenshotService, default_problem_name
from tests.conftest import InMemoryCatalogRepository, InMemoryImageStorage

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
PNG_BASE64 = base64.b64encode(PNG_BYTES).decode("ascii")


def _storage(container: AppContainer) -> InMemoryImageStorage:
    storage = container.screenshot_service.image_storage
    assert isinstance(storage, InMemoryImageStorage)
    return storage


def test_default_problem_name_uses_timestamp() -> None:
    name = default_problem_name(datetime(2026, 10, 19, 9, 5, 7, 999999, tzinfo=UTC))

    assert name == "problem-20261019-090507"


def test_save_screenshot_requires_active_session(container: AppContainer) -> None:
    with pytest.raises(NoActiveSessionError) as excinfo:
        container.screenshot_service.save_screenshot(PNG_BASE64, "Q1")

    assert excinfo.value.code == "no_active_session"
    assert _storage(container).images == {}


def test_save_screenshot_files_problem_in_active_set(
    container: AppContainer,
    catalog_repository: InMemoryCatalogRepository,
) -> None:
    view = container.session_commands.create_and_start_session(
        "Math", "Calculus", "Limits"
    )

    problem = container.screenshot_service.save_screenshot(PNG_BASE64, "  Q1 ")

    assert problem.title == "Q1"
    assert problem.set_id == view.record.set_id
    assert problem.image_path == "Math/Calculus/Limits/Q1.png"
    assert _storage(container).images[problem.image_path] == PNG_BYTES
    assert catalog_repository.problems == [problem]


def test_save_screenshot_falls_back_to_timestamp_name(container: AppContainer) -> None:
    container.session_commands.create_and_start_session("Math", "Calculus", "Limits")
    service = container.screenshot_service
    fixed = ScreenshotService(
        manager=service.manager,
        catalog=service.catalog,
        image_storage=service.image_storage,
        clock=lambda: datetime(2026, 10, 19, 14, 30, 0, tzinfo=UTC),
    )

    problem = fixed.save_screenshot(PNG_BASE64)

    assert problem.title == "problem-20261019-143000"


def test_save_screenshot_blank_name_uses_default(container: AppContainer) -> None:
    container.session_commands.create_and_start_session("Math", "Calculus", "Limits")

    problem = container.screenshot_service.save_screenshot(PNG_BASE64, "   ")

    assert re.fullmatch(r"problem-\d{8}-\d{6}", problem.title)


def test_save_screenshot_accepts_data_url(container: AppContainer) -> None:
    container.session_commands.create_and_start_session("Math", "Calculus", "Limits")

    problem = container.screenshot_service.save_screenshot(
        f"data:image/png;base64,{PNG_BASE64}", "Q2"
    )

    assert _storage(container).images[problem.image_path] == PNG_BYTES


@pytest.mark.parametrize("payload", ["not base64 at all!", "data:image/png;base64,"])
def test_save_screenshot_rejects_bad_image_data(
    container: AppContainer,
    catalog_repository: InMemoryCatalogRepository,
    payload: str,
) -> None:
    container.session_commands.create_and_start_session("Math", "Calculus", "Limits")

    with pytest.raises(InvalidScreenshotError):
        container.screenshot_service.save_screenshot(payload, "Q3")

    assert catalog_repository.problems == []


def test_save_screenshot_reports_stale_session_reference(
    container: AppContainer,
    catalog_repository: InMemoryCatalogRepository,
) -> None:
    view = container.session_commands.create_and_start_session(
        "Math", "Calculus", "Limits"
    )
    del catalog_repository.sets[view.record.set_id]

    with pytest.raises(RelatedDataNotFoundError):
        container.screenshot_service.save_screenshot(PNG_BASE64, "Q4")

    assert _storage(container).images == {}
    assert container.session_manager.get_active_session() == view.record
