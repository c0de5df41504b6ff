"""Environment manager: one installation plus the active environment."""
from pathlib import Path
from typing import Optional

from mcp_conda.commands.runner import path_overlay, run_capturing_output, run_command
from mcp_conda.config import DEFAULT_DOWNLOAD_TIMEOUT
from mcp_conda.environments import registry
from mcp_conda.errors import CommandFailedError, UnknownEnvironmentError
from mcp_conda.installation.installer import ensure_installed
from mcp_conda.logging import get_logger
from mcp_conda.types import BASE_ENVIRONMENT, PlatformInfo

logger = get_logger(__name__)


class EnvironmentManager:
    """Conda wrapper bound to one installation root.

    The root is bootstrapped on construction if it does not exist. It is
    expected to look like::

        ROOT
        ├── condabin
        │   └── conda(.bat)
        └── envs
            └── <name>
                └── bin/python (python.exe)

    Operations that take ``env_name`` default to the active environment,
    which starts as ``"base"`` and only changes through :meth:`activate` and
    :meth:`deactivate`.
    """

    def __init__(
        self,
        root: Path | str,
        platform: Optional[PlatformInfo] = None,
        capture_output: bool = False,
        download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
    ):
        self.installation = ensure_installed(root, platform, download_timeout)
        self.capture_output = capture_output
        self._env_name = BASE_ENVIRONMENT

    @property
    def root(self) -> Path:
        return self.installation.root

    @property
    def env_name(self) -> str:
        """Name of the active environment."""
        return self._env_name

    def list_environment_names(self) -> list[str]:
        return registry.list_environment_names(self.installation)

    def activate(self, env_name: str) -> None:
        """Make env_name the default for later operations; no subprocess runs."""
        if env_name not in self.list_environment_names():
            raise UnknownEnvironmentError(env_name)
        logger.info({"event": "environment_activated", "env_name": env_name})
        self._env_name = env_name

    def deactivate(self) -> None:
        logger.info({"event": "environment_deactivated", "env_name": self._env_name})
        self._env_name = BASE_ENVIRONMENT

    def create(
        self,
        env_name: str,
        *args: str,
        force: bool = False,
        from_file: Optional[Path | str] = None,
    ) -> Optional[str]:
        """Create an environment; extra args are packages or conda flags."""
        return registry.create_environment(
            self.installation,
            env_name,
            *args,
            force=force,
            from_file=from_file,
            capture_output=self.capture_output,
        )

    def get_version(self) -> str:
        """Return the ``conda -V`` line, e.g. ``conda 24.1.2``."""
        args = [self.installation.conda_bin, "-V"]
        returncode, stdout = run_capturing_output(self.installation, args)
        if returncode != 0:
            raise CommandFailedError(args, returncode, stdout)
        lines = stdout.splitlines()
        return lines[0].strip() if lines else ""

    def run_conda(self, *args: str) -> Optional[str]:
        """Run conda with arbitrary arguments."""
        return run_command(
            self.installation,
            [self.installation.conda_bin, *args],
            capture_output=self.capture_output,
        )

    def install(self, *args: str, env_name: Optional[str] = None) -> Optional[str]:
        return self._run_in("install", env_name, args)

    def uninstall(self, *args: str, env_name: Optional[str] = None) -> Optional[str]:
        return self._run_in("uninstall", env_name, args)

    def update(self, *args: str, env_name: Optional[str] = None) -> Optional[str]:
        return self._run_in("update", env_name, args)

    def pip_install(self, *args: str, env_name: Optional[str] = None) -> Optional[str]:
        return self.run_python("-m", "pip", "install", *args, env_name=env_name)

    def pip_uninstall(self, *args: str, env_name: Optional[str] = None) -> Optional[str]:
        return self.run_python("-m", "pip", "uninstall", "-y", *args, env_name=env_name)

    def run_python(self, *args: str, env_name: Optional[str] = None) -> Optional[str]:
        """Run the environment's python with its declared variables set.

        On Windows the environment's directories are also put in front of
        ``PATH`` so DLLs and scripts shipped with it are found.
        """
        context = registry.resolve_environment(
            self.installation, env_name or self._env_name
        )
        env_vars = {
            **path_overlay(self.installation, context.env_dir),
            **self.get_environment_variables(context.name),
        }
        return run_command(
            self.installation,
            [context.python_bin, *args],
            env_vars=env_vars,
            capture_output=self.capture_output,
        )

    def get_environment_variables(self, env_name: Optional[str] = None) -> dict[str, str]:
        return registry.get_environment_variables(
            self.installation, env_name or self._env_name
        )

    def _run_in(self, subcommand: str, env_name: Optional[str], args) -> Optional[str]:
        return self.run_conda(subcommand, "-y", "-n", env_name or self._env_name, *args)
