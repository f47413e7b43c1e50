import logging

import pytest
import structlog

from todolist.logging_config import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_logging():
    # The CLI points the 'todolist' logger at the runner's stderr; undo it so
    # later tests do not log into a closed stream.
    yield
    structlog.reset_defaults()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
