"""MCP conda package."""

__version__ = "0.1.0"

from mcp_conda.types import (
    BASE_ENVIRONMENT,
    CommandInvocation,
    EnvironmentContext,
    Installation,
    PlatformInfo,
)
from mcp_conda.environments.manager import EnvironmentManager
from mcp_conda.installation import ensure_installed
from mcp_conda.platforms import get_platform_info
from mcp_conda.errors import (
    CondaError,
    UnsupportedPlatformError,
    DownloadError,
    InstallationError,
    InstallationVerificationError,
    EnvironmentExistsError,
    UnknownEnvironmentError,
    ProcessError,
    CommandFailedError,
    MalformedOutputError,
)

__all__ = [
    # Types
    "BASE_ENVIRONMENT",
    "CommandInvocation",
    "EnvironmentContext",
    "Installation",
    "PlatformInfo",

    # Manager and bootstrap
    "EnvironmentManager",
    "ensure_installed",
    "get_platform_info",

    # Error types
    "CondaError",
    "UnsupportedPlatformError",
    "DownloadError",
    "InstallationError",
    "InstallationVerificationError",
    "EnvironmentExistsError",
    "UnknownEnvironmentError",
    "ProcessError",
    "CommandFailedError",
    "MalformedOutputError",
]
