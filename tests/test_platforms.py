"""Tests for platform capability lookup."""
import pytest

from mcp_conda.errors import UnsupportedPlatformError
from mcp_conda.platforms import get_platform_info, installer_command


@pytest.mark.parametrize(
    "system,machine,installer",
    [
        ("Linux", "x86_64", "Miniconda3-latest-Linux-x86_64.sh"),
        ("Darwin", "x86_64", "Miniconda3-latest-MacOSX-x86_64.sh"),
        ("Darwin", "arm64", "Miniconda3-latest-MacOSX-arm64.sh"),
        ("Windows", "AMD64", "Miniconda3-latest-Windows-x86_64.exe"),
    ],
)
def test_download_urls(system, machine, installer):
    info = get_platform_info(system, machine)
    assert info.download_url.endswith(f"/miniconda/{installer}")


def test_unpublished_architecture_has_no_url():
    info = get_platform_info("Linux", "aarch64")

    assert info.arch == "arm64"
    assert info.download_url is None
    assert info.conda_launcher == "condabin/conda"


def test_unknown_os():
    with pytest.raises(UnsupportedPlatformError):
        get_platform_info("Plan9", "x86_64")


def test_posix_capabilities(linux_platform):
    assert linux_platform.conda_launcher == "condabin/conda"
    assert linux_platform.python_launcher == "bin/python"
    assert linux_platform.shell_prefix == ()
    assert not linux_platform.mutates_path
    assert not linux_platform.is_windows


def test_windows_capabilities(windows_platform):
    assert windows_platform.conda_launcher == "condabin\\conda.bat"
    assert windows_platform.python_launcher == "python.exe"
    assert windows_platform.shell_prefix == ("cmd", "/c")
    assert windows_platform.mutates_path
    assert windows_platform.is_windows


def test_installer_command_posix(linux_platform):
    cmd = installer_command(linux_platform, "/tmp/Miniconda3.sh", "/opt/conda")
    assert cmd == ["bash", "/tmp/Miniconda3.sh", "-b", "-p", "/opt/conda"]


def test_installer_command_windows(windows_platform):
    cmd = installer_command(windows_platform, "C:\\tmp\\Miniconda3.exe", "C:\\conda")

    assert cmd == (
        "C:\\tmp\\Miniconda3.exe /InstallationType=JustMe /AddToPath=0 "
        "/RegisterPython=0 /S /D=C:\\conda"
    )


def test_installer_command_windows_root_with_spaces(windows_platform):
    root = "C:\\Users\\Jo Doe\\AppData\\Local\\mcp-conda\\miniconda3"
    installer = "C:\\Users\\Jo Doe\\AppData\\Local\\Temp\\Miniconda3.exe"

    cmd = installer_command(windows_platform, installer, root)

    # /D= must come last and stay unquoted even when the root has spaces
    assert cmd.startswith(f'"{installer}" /InstallationType=JustMe')
    assert cmd.endswith(f" /S /D={root}")
    assert '"/D=' not in cmd
