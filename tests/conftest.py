import logging

import pytest


@pytest.fixture
def pcspace_caplog(caplog):
    """caplog that also sees records of the (non-propagating) package logger."""
    logger = logging.getLogger("pcspace")
    logger.propagate = True
    caplog.set_level(logging.DEBUG, logger="pcspace")
    try:
        yield caplog
    finally:
        logger.propagate = False
