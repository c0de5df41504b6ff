"""Conda installation bootstrap."""

from mcp_conda.installation.installer import ensure_installed, verify_installation

__all__ = ["ensure_installed", "verify_installation"]
