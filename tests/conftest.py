import logging

import pytest

from p3dkit.reporting import SilentReporter, set_reporter, set_verbosity


@pytest.fixture(autouse=True)
def _reset_reporting():
    """The CLI installs a global reporter and log handler; undo both."""
    yield
    set_reporter(SilentReporter())
    set_verbosity(0)
    logger = logging.getLogger("p3dkit")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
