"""Environment enumeration, resolution and creation."""
import os
from pathlib import Path
from typing import Optional, Sequence

from mcp_conda.commands.runner import run_capturing_output, run_command
from mcp_conda.errors import (
    CommandFailedError,
    EnvironmentExistsError,
    MalformedOutputError,
)
from mcp_conda.logging import get_logger
from mcp_conda.types import BASE_ENVIRONMENT, EnvironmentContext, Installation

logger = get_logger(__name__)

VAR_SEPARATOR = " = "


def list_environment_names(installation: Installation) -> list[str]:
    """Return "base" followed by the environment folders, in listing order."""
    with os.scandir(installation.envs_dir) as entries:
        names = [
            entry.name
            for entry in entries
            if entry.is_dir() and not entry.name.startswith(".")
        ]
    return [BASE_ENVIRONMENT, *names]


def resolve_environment(installation: Installation, name: str) -> EnvironmentContext:
    """Resolve an environment name to its directory and python launcher."""
    if name == BASE_ENVIRONMENT:
        env_dir = installation.root
        python_bin = Path(installation.platform.python_launcher)
    else:
        env_dir = installation.envs_dir / name
        python_bin = Path("envs", name, installation.platform.python_launcher)

    return EnvironmentContext(name=name, env_dir=env_dir, python_bin=str(python_bin))


def uses_spec_file(args: Sequence[str]) -> bool:
    """Whether creation arguments point at an environment file."""
    return any(
        arg in ("-f", "--file") or arg.startswith("--file=") for arg in args
    )


def create_environment(
    installation: Installation,
    name: str,
    *args: str,
    force: bool = False,
    from_file: Optional[Path | str] = None,
    capture_output: bool = False,
) -> Optional[str]:
    """Create an environment, optionally from an environment file.

    File-based creation goes through ``conda env create`` first and retries
    with ``conda create`` if that fails; the two subcommands accept
    different argument shapes across conda releases.
    """
    if not force and name in list_environment_names(installation):
        logger.error({"event": "environment_exists", "env_name": name})
        raise EnvironmentExistsError(name)

    if from_file is not None:
        # Commands run from the installation root, so anchor the file to the caller
        env_file = Path(from_file).expanduser().absolute()
        args = ("-f", str(env_file), *args)

    conda = installation.conda_bin
    create_cmd = [conda, "create", "-y", "-n", name, *args]

    logger.info({"event": "environment_create", "env_name": name, "args": list(args)})

    if uses_spec_file(args):
        try:
            return run_command(
                installation,
                [conda, "env", "create", "--yes", "-n", name, *args],
                capture_output=capture_output,
            )
        except CommandFailedError as e:
            logger.warning(
                {
                    "event": "env_create_fallback",
                    "env_name": name,
                    "returncode": e.exit_code,
                }
            )

    return run_command(installation, create_cmd, capture_output=capture_output)


def parse_environment_variables(args: Sequence[str], output: str) -> dict[str, str]:
    """Parse ``KEY = VALUE`` lines; blank lines are skipped."""
    variables = {}
    for line in output.splitlines():
        if not line.strip():
            continue
        key, sep, value = line.partition(VAR_SEPARATOR)
        if not sep:
            raise MalformedOutputError(args, line)
        variables[key] = value
    return variables


def get_environment_variables(installation: Installation, name: str) -> dict[str, str]:
    """List the variables declared for an environment."""
    args = [installation.conda_bin, "env", "config", "vars", "list", "-n", name]

    returncode, stdout = run_capturing_output(installation, args)
    if returncode != 0:
        raise CommandFailedError(args, returncode, stdout)

    variables = parse_environment_variables(args, stdout)
    logger.debug(
        {"event": "environment_variables", "env_name": name, "keys": sorted(variables)}
    )
    return variables
