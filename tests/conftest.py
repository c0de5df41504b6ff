import json
import sys
from pathlib import Path

import pytest

from mcp_conda.environments.manager import EnvironmentManager
from mcp_conda.platforms import get_platform_info

FAKE_CONDA = Path(__file__).parent / "fake_conda.py"
FIXTURES = Path(__file__).parent.parent / "fixtures_data" / "conda"


def build_fake_installation(root: Path) -> Path:
    """Lay out a conda-like tree whose launcher is fake_conda.py"""
    condabin = root / "condabin"
    condabin.mkdir(parents=True)
    (root / "envs").mkdir()

    conda = condabin / "conda"
    conda.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{FAKE_CONDA}" "$@"\n')
    conda.chmod(0o755)

    (root / "bin").mkdir()
    python = root / "bin" / "python"
    python.write_text(f'#!/bin/sh\nexec "{sys.executable}" "$@"\n')
    python.chmod(0o755)

    return root


@pytest.fixture
def linux_platform():
    """Capabilities of a Linux x86_64 host"""
    return get_platform_info("Linux", "x86_64")


@pytest.fixture
def windows_platform():
    return get_platform_info("Windows", "AMD64")


@pytest.fixture
def conda_root(tmp_path):
    """A fake conda installation driven by real subprocesses"""
    if sys.platform == "win32":
        pytest.skip("fake conda launcher is a POSIX shell script")
    return build_fake_installation(tmp_path / "miniconda3")


@pytest.fixture
def manager(conda_root, linux_platform):
    return EnvironmentManager(conda_root, platform=linux_platform)


@pytest.fixture
def conda_calls(conda_root):
    """Read back the argument vectors fake conda was called with"""
    def read():
        log = conda_root / "calls.log"
        if not log.exists():
            return []
        return [json.loads(line) for line in log.read_text().splitlines()]
    return read


@pytest.fixture
def make_fake_installation():
    if sys.platform == "win32":
        pytest.skip("fake conda launcher is a POSIX shell script")
    return build_fake_installation


@pytest.fixture
def conda_fixtures():
    """Environment files and scripts used against the installation"""
    return FIXTURES
