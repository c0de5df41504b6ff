"""Bootstrap of the base conda installation."""

import asyncio
import subprocess
import tempfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from mcp_conda.commands.runner import run_capturing_output
from mcp_conda.config import DEFAULT_DOWNLOAD_TIMEOUT
from mcp_conda.errors import (
    InstallationError,
    InstallationVerificationError,
    UnsupportedPlatformError,
)
from mcp_conda.installation.fetching import fetch_installer
from mcp_conda.logging import get_logger
from mcp_conda.platforms import get_platform_info, installer_command
from mcp_conda.types import Installation, PlatformInfo

logger = get_logger(__name__)


def run_coroutine(coro):
    """Run coro to completion from synchronous code.

    Inside a running event loop the coroutine gets its own loop on a worker
    thread, since asyncio.run() refuses to nest.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, coro).result()


def run_installer(info: PlatformInfo, root: Path, timeout: float) -> None:
    """Download the platform installer and run it unattended into root."""
    if info.download_url is None:
        raise UnsupportedPlatformError(info.os_name, info.arch)

    with tempfile.TemporaryDirectory(prefix="mcp-conda-") as tmpdir:
        installer = run_coroutine(
            fetch_installer(info.download_url, Path(tmpdir), timeout)
        )

        cmd = installer_command(info, str(installer), str(root))
        logger.info({"event": "installer_start", "cmd": cmd})

        try:
            returncode = subprocess.run(cmd).returncode
        except OSError as e:
            raise InstallationError(str(root), -1, f"Failed to launch installer: {e}") from e

        if returncode != 0:
            logger.error(
                {"event": "installer_failed", "root": str(root), "returncode": returncode}
            )
            raise InstallationError(str(root), returncode)

    logger.info({"event": "installer_complete", "root": str(root)})


def verify_installation(installation: Installation) -> str:
    """Probe conda -V and return its first output line."""
    returncode, stdout = run_capturing_output(
        installation, [installation.conda_bin, "-V"]
    )
    if returncode != 0:
        logger.error(
            {
                "event": "verification_failed",
                "root": str(installation.root),
                "returncode": returncode,
            }
        )
        raise InstallationVerificationError(str(installation.root), returncode)

    version = stdout.strip().splitlines()[0] if stdout.strip() else ""
    logger.debug({"event": "installation_verified", "version": version})
    return version


def ensure_installed(
    root: Path | str,
    platform: Optional[PlatformInfo] = None,
    timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
) -> Installation:
    """Ensure a working conda installation exists at root.

    An existing root is taken as installed and only probed with ``conda -V``;
    otherwise Miniconda is downloaded and installed there first.

    Raises:
        UnsupportedPlatformError: no installer for this OS and architecture
        DownloadError: the installer could not be fetched
        InstallationError: the installer exited with a non-zero status
        InstallationVerificationError: ``conda -V`` failed
    """
    root = Path(root).expanduser().absolute()
    info = platform or get_platform_info()

    if not root.exists():
        logger.info({"event": "installation_missing", "root": str(root)})
        run_installer(info, root, timeout)

    installation = Installation(root=root, platform=info)
    verify_installation(installation)
    return installation
