import pytest
from loguru import logger
from returns.io import IOFailure, IOSuccess
from returns.result import Failure, Success

from utils.logger import FailureLevel, configure_logging, log_railway_function


@pytest.mark.parametrize(
    "outcome, expected",
    [
        pytest.param(Success(1), "it worked", id="result success"),
        pytest.param(IOSuccess(1), "it worked", id="io result success"),
        pytest.param(Failure(ValueError("bad")), "it failed", id="result failure"),
        pytest.param(IOFailure(ValueError("bad")), "it failed", id="io result failure"),
    ],
)
def test_logs_outcome(outcome, expected: str, caplog: pytest.LogCaptureFixture):
    # Arrange
    @log_railway_function("it failed", "it worked")
    def task(value: int):
        return outcome

    # Act
    result = task(1)
    # Assert
    assert result is outcome
    assert expected in caplog.text


def test_failure_level(caplog: pytest.LogCaptureFixture):
    @log_railway_function("careful", failure_level=FailureLevel.WARNING)
    def task():
        return Failure(ValueError("bad"))

    task()
    assert [record.levelname for record in caplog.records if record.message.strip() == "careful"] == [
        "WARNING"
    ]


def test_configure_logging_returns_sink_id():
    sink_id = configure_logging(verbose=True)
    try:
        assert isinstance(sink_id, int)
    finally:
        logger.remove(sink_id)
