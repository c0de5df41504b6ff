"""Error taxonomy for the conda environment manager."""
import logging
from typing import Any, Dict, Optional, Sequence
from mcp.types import (
    ErrorData,
    INVALID_PARAMS,
    INTERNAL_ERROR
)

from mcp_conda.logging import get_logger

logger = get_logger(__name__)


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """Log an error with context."""
    logger = logger or get_logger(__name__)

    error_info = {
        "error_type": error.__class__.__name__,
        "error_message": str(error)
    }
    if context:
        error_info["context"] = context
    if isinstance(error, CondaError):
        error_info["code"] = error.code
        error_info["details"] = error.details

    logger.error("Conda error occurred", extra={"data": error_info})


class CondaError(Exception):
    """Base error class for the conda wrapper."""
    def __init__(
        self,
        message: str,
        code: int = INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_error_data(self) -> ErrorData:
        """Convert to ErrorData format."""
        return ErrorData(
            code=self.code,
            message=str(self),
            data=self.details
        )


class UnsupportedPlatformError(CondaError):
    """No installer is published for this OS and architecture."""
    def __init__(self, os_name: str, arch: str):
        super().__init__(
            f"Unsupported platform: {os_name} {arch}",
            details={"os": os_name, "arch": arch}
        )


class DownloadError(CondaError):
    """Fetching the installer failed or timed out."""
    def __init__(self, url: str, reason: str):
        super().__init__(
            f"Failed to download {url}: {reason}",
            details={"url": url, "reason": reason}
        )


class InstallationError(CondaError):
    """The installer exited with a non-zero status."""
    def __init__(self, root: str, exit_code: int, message: Optional[str] = None):
        super().__init__(
            message or f"Installer for {root} exited with code {exit_code}",
            details={"root": root, "exit_code": exit_code}
        )
        self.exit_code = exit_code


class InstallationVerificationError(InstallationError):
    """The installed tree does not answer the version probe."""
    def __init__(self, root: str, exit_code: int):
        super().__init__(
            root,
            exit_code,
            f"Conda installation at {root} is not usable (conda -V exited with code {exit_code})"
        )


class EnvironmentExistsError(CondaError):
    """Environment name already taken."""
    def __init__(self, env_name: str):
        super().__init__(
            f"Environment {env_name} already exists",
            code=INVALID_PARAMS,
            details={"env_name": env_name}
        )


class UnknownEnvironmentError(CondaError):
    """Environment name not found under the installation."""
    def __init__(self, env_name: str):
        super().__init__(
            f"Environment {env_name} not found",
            code=INVALID_PARAMS,
            details={"env_name": env_name}
        )


class ProcessError(CondaError):
    """A subprocess could not be run or misbehaved."""
    def __init__(self, message: str, args: Sequence[str], details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details={"args": list(args), **(details or {})})
        self.command = list(args)


class CommandFailedError(ProcessError):
    """A subprocess exited with a non-zero status."""
    def __init__(self, args: Sequence[str], exit_code: int, output: Optional[str] = None):
        super().__init__(
            f"Command {' '.join(args)} failed with code {exit_code}",
            args,
            {"exit_code": exit_code, "output": output}
        )
        self.exit_code = exit_code
        self.output = output


class MalformedOutputError(ProcessError):
    """A subprocess printed a line that does not follow its output format."""
    def __init__(self, args: Sequence[str], line: str):
        super().__init__(
            f"Unexpected output line from {' '.join(args)}: {line!r}",
            args,
            {"line": line}
        )
        self.line = line
