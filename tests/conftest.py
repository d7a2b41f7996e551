import logging

import pytest


@pytest.fixture(autouse=True)
def reset_bank_logger():
    """Drop handlers that main() attaches to the package logger"""
    yield
    logger = logging.getLogger("bank_simulator")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
