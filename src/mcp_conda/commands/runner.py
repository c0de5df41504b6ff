"""Synchronous command execution against a conda installation."""

import os
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from mcp_conda.errors import CommandFailedError, ProcessError
from mcp_conda.logging import get_logger
from mcp_conda.types import CommandInvocation, Installation

logger = get_logger(__name__)


def build_invocation(
    installation: Installation,
    args: Sequence[str],
    env_vars: Optional[dict[str, str]] = None,
    inherit_io: bool = True,
) -> CommandInvocation:
    """Build an invocation rooted at the installation directory."""
    # Launchers are relative to the root; cmd.exe is needed for conda.bat
    argv = [*installation.platform.shell_prefix, *args]

    env = {**os.environ, **env_vars} if env_vars else None

    return CommandInvocation(
        argv=argv, cwd=installation.root, env=env, inherit_io=inherit_io
    )


def execute(invocation: CommandInvocation) -> tuple[int, Optional[str]]:
    """Run an invocation to completion and return (returncode, stdout)."""

    logger.debug(
        {
            "event": "cmd_exec",
            "argv": invocation.argv,
            "cwd": str(invocation.cwd),
            "inherit_io": invocation.inherit_io,
        }
    )

    try:
        process = subprocess.run(
            invocation.argv,
            cwd=invocation.cwd,
            env=invocation.env,
            # Captured runs must not share the caller's stdin (the MCP transport)
            stdin=None if invocation.inherit_io else subprocess.DEVNULL,
            stdout=None if invocation.inherit_io else subprocess.PIPE,
            text=True,
            bufsize=1,
        )
    except OSError as e:
        logger.error(
            {"event": "cmd_launch_failed", "argv": invocation.argv, "error": str(e)}
        )
        raise ProcessError(
            f"Failed to launch {invocation.argv[0]}: {e}", invocation.argv
        ) from e

    if process.stdout:
        logger.debug(
            {"event": "cmd_stdout", "argv": invocation.argv, "output": process.stdout}
        )

    logger.debug(
        {
            "event": "cmd_complete",
            "argv": invocation.argv,
            "returncode": process.returncode,
        }
    )

    return process.returncode, process.stdout


def run_command(
    installation: Installation,
    args: Sequence[str],
    env_vars: Optional[dict[str, str]] = None,
    capture_output: bool = False,
) -> Optional[str]:
    """Run a command and raise CommandFailedError on a non-zero exit.

    Streams go straight to the caller's terminal unless ``capture_output``
    is set, in which case stdout is returned as text.
    """
    invocation = build_invocation(
        installation, args, env_vars, inherit_io=not capture_output
    )
    returncode, stdout = execute(invocation)

    if returncode != 0:
        logger.error(
            {"event": "cmd_failed", "argv": invocation.argv, "returncode": returncode}
        )
        raise CommandFailedError(invocation.argv, returncode, stdout)

    return stdout


def run_capturing_output(
    installation: Installation,
    args: Sequence[str],
    env_vars: Optional[dict[str, str]] = None,
) -> tuple[int, str]:
    """Run a command with stdout captured; non-zero exits are returned, not raised."""
    invocation = build_invocation(installation, args, env_vars, inherit_io=False)
    returncode, stdout = execute(invocation)
    return returncode, stdout or ""


def path_overlay(installation: Installation, env_dir: Path) -> dict[str, str]:
    """PATH entries an environment needs ahead of the system ones."""
    if not installation.platform.mutates_path:
        return {}

    path = os.environ.get("PATH", "")
    for entry in (
        env_dir,
        env_dir / "Scripts",
        env_dir / "Library",
        env_dir / "Library" / "Bin",
    ):
        path = f"{entry}{os.pathsep}{path}"

    logger.debug({"event": "path_overlay", "env_dir": str(env_dir), "path": path})

    return {"PATH": path}
