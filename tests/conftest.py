import logging

import pytest

from simultaneous_kelly.utils.logging import PACKAGE_LOGGER


@pytest.fixture(autouse=True)
def restore_package_logging():
    """CLI runs reconfigure the package logger; put it back after each test."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = logger.handlers[:]
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
