"""Process invocation against a conda installation."""

from mcp_conda.commands.runner import (
    build_invocation,
    execute,
    path_overlay,
    run_capturing_output,
    run_command,
)

__all__ = [
    "build_invocation",
    "execute",
    "path_overlay",
    "run_capturing_output",
    "run_command",
]
