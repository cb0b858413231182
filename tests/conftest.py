"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root (and this directory, for shared builders) to sys.path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))
sys.path.insert(0, str(Path(__file__).parent))

from infra.bootstrap import PipelineBootstrap  # noqa: E402
from services.publish import InMemoryChannelTransport  # noqa: E402
from pipeline import BatchProcessor, EventPublisher  # noqa: E402
from sms_fixtures import GENERAL, MEDIA, SECRET  # noqa: E402


@pytest.fixture(autouse=True)
def reset_bootstrap():
    """Each test builds its own pipeline singleton."""
    PipelineBootstrap.reset()
    yield
    PipelineBootstrap.reset()


@pytest.fixture
def transport():
    return InMemoryChannelTransport()


@pytest.fixture
def processor(transport):
    return BatchProcessor(
        auth_token=SECRET,
        general_channel=GENERAL,
        media_channel=MEDIA,
        publisher=EventPublisher(transport),
    )
