from __future__ import annotations

import logging

import pytest

from chutecad.logging_config import LOGGER_NAMESPACES


@pytest.fixture(autouse=True)
def reset_package_loggers():
    yield
    for name in LOGGER_NAMESPACES:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
