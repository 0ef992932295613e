"""Pytest configuration and shared fixtures for testing"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(Path(__file__).parent))  # browser_fakes

from src.config.settings import Settings
from browser_fakes import VALID_URL

# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    """Test settings with every delay set to zero"""
    return Settings(
        env="test",
        navigation_retry_delay=0,
        page_settle_delay=0,
        click_settle_delay=0,
        verify_retry_delay=0,
        browser_timeout_ms=5000,
    )


@pytest.fixture
def valid_url() -> str:
    return VALID_URL


@pytest.fixture
def test_fixture_path() -> Path:
    """Return the path to the test fixtures directory"""
    return Path(__file__).parent / "fixtures"


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "slow: mark test as slow (can be skipped with -m 'not slow')"
    )
    config.addinivalue_line(
        "markers", "browser: test launches a real Chromium through Playwright"
    )
