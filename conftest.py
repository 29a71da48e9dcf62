"""Project-wide pytest fixtures."""

import pytest
from django.core.cache import cache

from apps.finances.gateways.fake import RecordingGateway


@pytest.fixture(autouse=True)
def _isolated_config_and_gateway():
    """Drop the cached AppConfig snapshot and recorded gateway calls between tests."""
    cache.clear()
    RecordingGateway.reset()
    yield
    RecordingGateway.reset()
