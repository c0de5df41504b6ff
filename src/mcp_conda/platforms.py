"""Platform detection and capability mapping."""
import platform
import subprocess
from typing import NamedTuple, Optional, Union

from mcp_conda.errors import UnsupportedPlatformError
from mcp_conda.types import PlatformInfo

MINICONDA_BASE_URL = "https://repo.anaconda.com/miniconda"


class PlatformMapping(NamedTuple):
    """OS-family specific values."""
    conda_launcher: str
    python_launcher: str
    shell_prefix: tuple[str, ...]
    mutates_path: bool


# Architecture aliases reported by platform.machine()
ARCH_MAPPINGS = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "arm64",
    "arm64": "arm64",
}

PLATFORM_MAPPINGS = {
    "Linux": PlatformMapping(
        conda_launcher="condabin/conda",
        python_launcher="bin/python",
        shell_prefix=(),
        mutates_path=False,
    ),
    "Darwin": PlatformMapping(
        conda_launcher="condabin/conda",
        python_launcher="bin/python",
        shell_prefix=(),
        mutates_path=False,
    ),
    "Windows": PlatformMapping(
        conda_launcher="condabin\\conda.bat",
        python_launcher="python.exe",
        shell_prefix=("cmd", "/c"),
        mutates_path=True,
    ),
}

DOWNLOAD_URLS = {
    ("Linux", "x86_64"): f"{MINICONDA_BASE_URL}/Miniconda3-latest-Linux-x86_64.sh",
    ("Darwin", "x86_64"): f"{MINICONDA_BASE_URL}/Miniconda3-latest-MacOSX-x86_64.sh",
    ("Darwin", "arm64"): f"{MINICONDA_BASE_URL}/Miniconda3-latest-MacOSX-arm64.sh",
    ("Windows", "x86_64"): f"{MINICONDA_BASE_URL}/Miniconda3-latest-Windows-x86_64.exe",
}


def get_platform_info(system: Optional[str] = None, machine: Optional[str] = None) -> PlatformInfo:
    """Get capabilities for the given (or current) platform.

    The download URL is ``None`` for architectures without a published
    installer; an existing installation is still usable there.
    """
    system = system or platform.system()
    machine = (machine or platform.machine()).lower()

    if system not in PLATFORM_MAPPINGS:
        raise UnsupportedPlatformError(system, machine)

    arch = ARCH_MAPPINGS.get(machine, machine)
    platform_map = PLATFORM_MAPPINGS[system]

    return PlatformInfo(
        os_name=system,
        arch=arch,
        download_url=DOWNLOAD_URLS.get((system, arch)),
        conda_launcher=platform_map.conda_launcher,
        python_launcher=platform_map.python_launcher,
        shell_prefix=platform_map.shell_prefix,
        mutates_path=platform_map.mutates_path,
    )


def installer_command(info: PlatformInfo, installer: str, root: str) -> Union[list[str], str]:
    """Command line running the downloaded installer unattended into root.

    The Windows installer reads ``/D=`` raw to the end of the line, so it goes
    last and unquoted; the command is returned as a string to keep it that way.
    """
    if info.is_windows:
        head = subprocess.list2cmdline(
            [installer, "/InstallationType=JustMe", "/AddToPath=0", "/RegisterPython=0", "/S"]
        )
        return f"{head} /D={root}"
    return ["bash", installer, "-b", "-p", root]


def is_platform_supported() -> bool:
    """Check if a fresh installation can be bootstrapped on this platform."""
    try:
        return get_platform_info().download_url is not None
    except UnsupportedPlatformError:
        return False
