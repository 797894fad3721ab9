"""
Pytest configuration and shared fixtures.

This module provides central pytest configuration, custom markers,
and shared fixtures for the cattri test suite.
"""

from collections.abc import Generator

import pytest

from cattri.constants import TRACE

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (several components together)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests (hypothesis)"
    )


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture
def trace_logs(
    caplog: pytest.LogCaptureFixture,
) -> Generator[pytest.LogCaptureFixture, None, None]:
    """
    Capture cattri log records down to the TRACE level.

    Yields:
        pytest.LogCaptureFixture: caplog configured for the cattri logger
    """
    with caplog.at_level(TRACE, logger="cattri"):
        yield caplog
