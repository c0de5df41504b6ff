import logging

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS

from mcp_conda.errors import (
    CommandFailedError,
    CondaError,
    EnvironmentExistsError,
    InstallationError,
    InstallationVerificationError,
    MalformedOutputError,
    ProcessError,
    UnknownEnvironmentError,
    log_error,
)


def test_error_hierarchy():
    assert issubclass(InstallationVerificationError, InstallationError)
    assert issubclass(CommandFailedError, ProcessError)
    assert issubclass(MalformedOutputError, ProcessError)
    assert issubclass(ProcessError, CondaError)


def test_command_failed_error_details():
    error = CommandFailedError(["condabin/conda", "install"], 3, "partial output")

    assert error.exit_code == 3
    assert error.command == ["condabin/conda", "install"]
    assert error.details == {
        "args": ["condabin/conda", "install"],
        "exit_code": 3,
        "output": "partial output",
    }
    assert "failed with code 3" in str(error)


def test_to_error_data():
    data = UnknownEnvironmentError("missing").to_error_data()

    assert data.code == INVALID_PARAMS
    assert data.message == "Environment missing not found"
    assert data.data == {"env_name": "missing"}

    assert EnvironmentExistsError("x").code == INVALID_PARAMS
    assert InstallationVerificationError("/opt/conda", 1).code == INTERNAL_ERROR


def test_log_error(caplog):
    logger = logging.getLogger("test.errors")

    with caplog.at_level(logging.ERROR, logger="test.errors"):
        log_error(MalformedOutputError(["conda"], "garbage"), {"tool": "x"}, logger)

    record = caplog.records[0]
    assert record.data["error_type"] == "MalformedOutputError"
    assert record.data["context"] == {"tool": "x"}
    assert record.data["details"]["line"] == "garbage"
