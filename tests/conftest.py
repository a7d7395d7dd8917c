"""
Shared pytest fixtures.
"""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers added by setup_logging so they never outlive a test's streams."""
    yield
    logger = logging.getLogger("occ")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
