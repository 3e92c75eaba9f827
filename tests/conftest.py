import pytest

from symbolic_calculus.logging_system import LogLevel, configure_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    """Each test starts from the default logging configuration"""
    configure_logging(LogLevel.MINIMAL)
    yield
    configure_logging(LogLevel.MINIMAL)
