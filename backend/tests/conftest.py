"""Pytest Configuration and Shared Fixtures

This file is automatically loaded by pytest for everything under tests/.
"""
import pytest


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "unit: Unit tests with fakes only (fast)"
    )
    config.addinivalue_line(
        "markers",
        "integration: Tests exercising several components together"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def captured_logs(caplog):
    """Capture loguru messages through the stdlib caplog handler."""
    from ivis_data.logger import logger

    handler_id = logger.add(caplog.handler, format="{message}", level="DEBUG")
    yield caplog
    logger.remove(handler_id)
