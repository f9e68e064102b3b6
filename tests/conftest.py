"""Shared pytest fixtures"""

import pytest

from core.projects import ProjectStore
from core.providers.mock import MockMediaProvider, MockTextProvider, MockVisionProvider
from core.storage import InMemoryStorage
from tests.mocks import ScriptedTextProvider
from tests.mocks.fixtures import (
    make_analysis,
    make_script,
    make_template,
    make_timeline,
    make_video,
)


# ============================================================
# Providers
# ============================================================

@pytest.fixture
def scripted_text():
    """Fresh scriptable text provider for each test"""
    provider = ScriptedTextProvider()
    yield provider
    provider.reset()


@pytest.fixture
def mock_text():
    return MockTextProvider()


@pytest.fixture
def mock_vision():
    return MockVisionProvider()


@pytest.fixture
def mock_media():
    return MockMediaProvider(default_duration=90.0)


# ============================================================
# Storage
# ============================================================

@pytest.fixture
def memory_storage():
    return InMemoryStorage()


@pytest.fixture
def project_store(memory_storage):
    return ProjectStore(memory_storage)


# ============================================================
# Test Data Fixtures
# ============================================================

@pytest.fixture
def sample_video():
    """90 second sample video"""
    return make_video()


@pytest.fixture
def sample_analysis():
    """Three equal scenes over 90 seconds"""
    return make_analysis()


@pytest.fixture
def sample_template():
    return make_template()


@pytest.fixture
def sample_script():
    return make_script()


@pytest.fixture
def sample_timeline():
    return make_timeline()


# ============================================================
# Markers Configuration
# ============================================================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks integration tests"
    )
    config.addinivalue_line(
        "markers", "live_api: marks tests that hit real APIs (requires keys)"
    )
