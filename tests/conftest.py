"""Pytest fixtures for dracoonpy tests."""
import pytest

from dracoonpy.core.upload.models import FileUploadRequest

from tests.helpers import CountingTokenProvider, FakeApiClient, RecordingCallback


@pytest.fixture
def fake_api():
    """Fake REST transport."""
    return FakeApiClient()


@pytest.fixture
def tokens():
    """Token provider counting requests."""
    return CountingTokenProvider()


@pytest.fixture
def upload_request():
    """A valid upload request."""
    return FileUploadRequest(parent_id=42, name='report.pdf')


@pytest.fixture
def recorder():
    """Recording upload callback."""
    return RecordingCallback()
