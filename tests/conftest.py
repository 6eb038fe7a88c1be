"""Test configuration and fixtures."""

import os
import tempfile
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# Keep test log files out of the project tree
TEST_LOG_DIR = os.path.join(tempfile.gettempdir(), "sop_writer_test_logs")
os.environ.setdefault("LOG_DIR", TEST_LOG_DIR)

from sop_writer.config import Settings  # noqa: E402
from sop_writer.models import ApplicationRecord, CourseMetadata  # noqa: E402

TEST_GEMINI_KEY = "test-gemini-key"
TEST_OPENROUTER_KEY = "test-openrouter-key"


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a temporary directory."""
    return Settings(
        gemini_api_key=TEST_GEMINI_KEY,
        openrouter_api_key=TEST_OPENROUTER_KEY,
        base_dir=tmp_path,
        _env_file=None,
    )


@pytest.fixture
def metadata():
    return CourseMetadata(
        course="Data Science",
        university="University of Leeds",
        country="United Kingdom",
        course_info="A one-year taught programme in statistics and machine learning.",
    )


@pytest.fixture
def make_record():
    """Factory for application records."""

    def _make(**fields: Any) -> ApplicationRecord:
        fields.setdefault("candidate_name", "Asha")
        fields.setdefault("course_input", "MSc Data Science at the University of Leeds, UK.")
        return ApplicationRecord(**fields)

    return _make


def make_http_session(
    status: int = 200,
    payload: Any = None,
    text: str = "",
    error: Optional[BaseException] = None,
) -> MagicMock:
    """Build a stand-in for ``aiohttp.ClientSession``.

    ``session.post(...)`` and ``session.get(...)`` return an async context
    manager yielding a response with the given status, JSON payload and text.
    If ``error`` is given, the request itself raises it.
    """
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload)
    response.text = AsyncMock(return_value=text)
    response.raise_for_status = MagicMock()

    session = MagicMock()
    for method in (session.post, session.get):
        if error is not None:
            method.side_effect = error
        else:
            method.return_value.__aenter__.return_value = response
            method.return_value.__aexit__.return_value = False
    session.response = response
    return session


@pytest.fixture
def http_session():
    return make_http_session
