"""
Pytest configuration and shared fixtures for backend tests.
"""
import sys
from pathlib import Path

import pytest

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from mediatools.adapter import FFMpegAdapter
from mediatools.config import clear_config_cache

from tests.fixtures.ffmpeg_factories import create_config


@pytest.fixture(autouse=True)
def _reset_config_cache():
    """Keep the cached FFMpegConfig from leaking between tests."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture(scope="function")
def ffmpeg_config():
    """A config pointing at /usr/bin/ffmpeg with no default threads."""
    return create_config()


@pytest.fixture(scope="function")
def adapter(ffmpeg_config):
    """An FFMpegAdapter bound to the test config."""
    return FFMpegAdapter(ffmpeg_config)
