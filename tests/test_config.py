import logging
from pathlib import Path

import pytest

from mcp_conda.config import DEFAULT_DOWNLOAD_TIMEOUT, default_root, load_config


def test_load_config_defaults():
    config = load_config({})

    assert config.root == default_root()
    assert config.root.name == "miniconda3"
    assert config.log_level == logging.DEBUG
    assert config.download_timeout == DEFAULT_DOWNLOAD_TIMEOUT


def test_load_config_from_environment(tmp_path):
    config = load_config({
        "MCP_CONDA_ROOT": str(tmp_path / "conda"),
        "MCP_CONDA_LOG_LEVEL": "warning",
        "MCP_CONDA_DOWNLOAD_TIMEOUT": "2.5",
    })

    assert config.root == Path(tmp_path / "conda")
    assert config.log_level == logging.WARNING
    assert config.download_timeout == 2.5


@pytest.mark.parametrize(
    "environ",
    [
        {"MCP_CONDA_LOG_LEVEL": "chatty"},
        {"MCP_CONDA_DOWNLOAD_TIMEOUT": "soon"},
        {"MCP_CONDA_DOWNLOAD_TIMEOUT": "-1"},
    ],
)
def test_load_config_invalid(environ):
    with pytest.raises(ValueError):
        load_config(environ)
