"""Runtime configuration read from the process environment."""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import appdirs

APP_NAME = "mcp-conda"
DEFAULT_DOWNLOAD_TIMEOUT = 10.0


@dataclass(frozen=True)
class Config:
    """Server configuration"""
    root: Path
    log_level: int
    download_timeout: float


def default_root() -> Path:
    return Path(appdirs.user_data_dir(APP_NAME)) / "miniconda3"


def parse_log_level(value: str) -> int:
    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {value}")
    return level


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Build configuration from MCP_CONDA_* variables."""
    environ = os.environ if environ is None else environ

    root = environ.get("MCP_CONDA_ROOT")
    timeout = environ.get("MCP_CONDA_DOWNLOAD_TIMEOUT")

    try:
        download_timeout = float(timeout) if timeout else DEFAULT_DOWNLOAD_TIMEOUT
    except ValueError:
        raise ValueError(f"Invalid download timeout: {timeout}") from None
    if download_timeout <= 0:
        raise ValueError(f"Invalid download timeout: {timeout}")

    return Config(
        root=Path(root).expanduser() if root else default_root(),
        log_level=parse_log_level(environ.get("MCP_CONDA_LOG_LEVEL", "DEBUG")),
        download_timeout=download_timeout,
    )
