"""Core type definitions"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

BASE_ENVIRONMENT = "base"


@dataclass(frozen=True)
class PlatformInfo:
    """Platform-specific capabilities for one OS family and architecture"""
    os_name: str
    arch: str
    download_url: Optional[str]
    conda_launcher: str
    python_launcher: str
    shell_prefix: tuple[str, ...]
    mutates_path: bool

    @property
    def is_windows(self) -> bool:
        return self.os_name == "Windows"


@dataclass(frozen=True)
class Installation:
    """Conda installation rooted at a filesystem path"""
    root: Path
    platform: PlatformInfo

    @property
    def envs_dir(self) -> Path:
        return self.root / "envs"

    @property
    def conda_bin(self) -> str:
        return self.platform.conda_launcher


@dataclass(frozen=True)
class EnvironmentContext:
    """Execution context an environment name resolves to"""
    name: str
    env_dir: Path
    python_bin: str


@dataclass(frozen=True)
class CommandInvocation:
    """One synchronous subprocess execution"""
    argv: list[str]
    cwd: Path
    env: Optional[dict[str, str]]
    inherit_io: bool
