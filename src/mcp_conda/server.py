"""MCP server implementation."""
import asyncio
import json
from typing import Any, Dict, List

import anyio
import anyio.to_thread
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.models import InitializationOptions
from mcp.server import stdio

from mcp_conda import __version__
from mcp_conda.config import load_config
from mcp_conda.environments.manager import EnvironmentManager
from mcp_conda.errors import CondaError, log_error
from mcp_conda.logging import configure_logging, get_logger

logger = get_logger("server")

ENV_NAME_PROPERTY = {
    "type": "string",
    "description": "Environment name, defaults to the active environment",
}

PACKAGES_PROPERTY = {
    "type": "array",
    "items": {"type": "string"},
    "description": "Package specs and extra arguments",
}


def _packages_tool(name: str, description: str) -> types.Tool:
    return types.Tool(
        name=name,
        description=description,
        inputSchema={
            "type": "object",
            "properties": {"packages": PACKAGES_PROPERTY, "env_name": ENV_NAME_PROPERTY},
            "required": ["packages"],
        },
    )


def _env_tool(name: str, description: str, required: bool = False) -> types.Tool:
    return types.Tool(
        name=name,
        description=description,
        inputSchema={
            "type": "object",
            "properties": {"env_name": ENV_NAME_PROPERTY},
            "required": ["env_name"] if required else [],
        },
    )


tools = [
    types.Tool(
        name="conda_version",
        description="Report the conda version of the managed installation",
        inputSchema={"type": "object", "properties": {}},
    ),
    types.Tool(
        name="conda_list_environments",
        description="List conda environments and the active one",
        inputSchema={"type": "object", "properties": {}},
    ),
    types.Tool(
        name="conda_create_environment",
        description="Create a conda environment from packages or an environment file",
        inputSchema={
            "type": "object",
            "properties": {
                "env_name": {"type": "string", "description": "Environment name"},
                "packages": PACKAGES_PROPERTY,
                "file": {"type": "string", "description": "Path to an environment.yml"},
                "force": {"type": "boolean", "description": "Recreate if it exists"},
            },
            "required": ["env_name"],
        },
    ),
    _env_tool("conda_activate", "Make an environment the default for later calls", required=True),
    types.Tool(
        name="conda_deactivate",
        description="Reset the active environment to base",
        inputSchema={"type": "object", "properties": {}},
    ),
    _packages_tool("conda_install", "Install conda packages into an environment"),
    _packages_tool("conda_uninstall", "Remove conda packages from an environment"),
    _packages_tool("conda_update", "Update conda packages in an environment"),
    _packages_tool("conda_pip_install", "Install packages with the environment's pip"),
    _packages_tool("conda_pip_uninstall", "Remove packages with the environment's pip"),
    types.Tool(
        name="conda_run_python",
        description="Run the environment's python with the given arguments",
        inputSchema={
            "type": "object",
            "properties": {
                "args": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Arguments passed to python",
                },
                "env_name": ENV_NAME_PROPERTY,
            },
            "required": ["args"],
        },
    ),
    _env_tool("conda_environment_variables", "List variables declared for an environment"),
]


PACKAGE_OPERATIONS = {
    "conda_install": "install",
    "conda_uninstall": "uninstall",
    "conda_update": "update",
    "conda_pip_install": "pip_install",
    "conda_pip_uninstall": "pip_uninstall",
}


def _result(data: Any) -> list[types.TextContent]:
    return [types.TextContent(type="text", text=json.dumps({"success": True, "data": data}))]


def _failure(error: str, code: int | None = None) -> list[types.TextContent]:
    payload: Dict[str, Any] = {"success": False, "error": error}
    if code is not None:
        payload["code"] = code
    return [types.TextContent(type="text", text=json.dumps(payload))]


def handle_tool_call(
    manager: EnvironmentManager, name: str, arguments: Dict[str, Any]
) -> list[types.TextContent]:
    """Dispatch one tool call to the manager."""
    env_name = arguments.get("env_name")
    packages = arguments.get("packages", [])

    try:
        if name == "conda_version":
            return _result({"version": manager.get_version()})

        elif name == "conda_list_environments":
            return _result({
                "environments": manager.list_environment_names(),
                "active": manager.env_name,
            })

        elif name == "conda_create_environment":
            output = manager.create(
                arguments["env_name"],
                *packages,
                force=arguments.get("force", False),
                from_file=arguments.get("file"),
            )
            return _result({"env_name": arguments["env_name"], "output": output})

        elif name == "conda_activate":
            manager.activate(arguments["env_name"])
            return _result({"active": manager.env_name})

        elif name == "conda_deactivate":
            manager.deactivate()
            return _result({"active": manager.env_name})

        elif name in PACKAGE_OPERATIONS:
            operation = getattr(manager, PACKAGE_OPERATIONS[name])
            output = operation(*packages, env_name=env_name)
            return _result({"env_name": env_name or manager.env_name, "output": output})

        elif name == "conda_run_python":
            output = manager.run_python(*arguments["args"], env_name=env_name)
            return _result({"env_name": env_name or manager.env_name, "output": output})

        elif name == "conda_environment_variables":
            return _result({"variables": manager.get_environment_variables(env_name)})

        return _failure(f"Unknown tool: {name}")

    except CondaError as e:
        log_error(e, {"tool": name, "arguments": arguments}, logger)
        return _failure(str(e), e.code)
    except (KeyError, OSError) as e:
        log_error(e, {"tool": name, "arguments": arguments}, logger)
        return _failure(f"{e.__class__.__name__}: {e}")


async def init_server(manager: EnvironmentManager) -> Server:
    logger.info(f"Registered tools: {', '.join(t.name for t in tools)}")

    server = Server("mcp-conda")
    # The manager holds the active environment; one call at a time
    call_lock = anyio.Lock()

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        logger.debug("Tools requested")
        return tools

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> list[types.TextContent]:
        logger.debug(f"Tool call received: {name} with arguments {arguments}")
        async with call_lock:
            return await anyio.to_thread.run_sync(
                handle_tool_call, manager, name, arguments or {}
            )

    return server


async def serve(manager: EnvironmentManager) -> None:
    logger.info("Starting MCP conda server")
    server = await init_server(manager)
    async with stdio.stdio_server() as (read_stream, write_stream):
        init_options = InitializationOptions(
            server_name="mcp-conda",
            server_version=__version__,
            capabilities=types.ServerCapabilities(
                tools=types.ToolsCapability(listChanged=False),
                logging=types.LoggingCapability(),
            ),
        )
        await server.run(read_stream, write_stream, init_options)


def main() -> None:
    """Run the MCP server."""
    config = load_config()
    configure_logging(config.log_level)
    # The bootstrap drives its own event loop, so it runs before serve()
    manager = EnvironmentManager(
        config.root, capture_output=True, download_timeout=config.download_timeout
    )
    asyncio.run(serve(manager))
