# su_mcp/server.py
"""MCP server for shader usage scans.

This module provides a Model Context Protocol server that lets AI
assistants scan a Unity project for shader usage and query the latest
scan by shader model or shader name.
"""
import asyncio
from pathlib import Path
from typing import Any, List, Optional

from mcp.server.models import InitializationOptions
from mcp.server import NotificationOptions, Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    Tool,
    TextContent,
    ImageContent,
    EmbeddedResource,
)

from su_mcp import __version__
from su_mcp.aggregator import ShaderUsageAggregator
from su_mcp.assets import UnityProjectAssets
from su_mcp.config import Config
from su_mcp.detectors import ShaderUsageDetector
from su_mcp.models import Issue, ProfileIndex, ShaderHandle, ShaderProfile, ShadingModel
from su_mcp.query import filter_by_model as query_by_model, find_shaders
from su_mcp.report_generator import ReportGenerator

# Create MCP server instance
server = Server("shader-usage")

# Snapshot of the latest scan; replaced wholesale by every scan_project call
_current_index: Optional[ProfileIndex] = None

NO_SCAN_MESSAGE = "No scan has been run yet. Call scan_project first."


def get_current_index() -> Optional[ProfileIndex]:
    """Return the snapshot held from the most recent scan, if any."""
    return _current_index


def set_current_index(index: Optional[ProfileIndex]) -> None:
    global _current_index
    _current_index = index


def load_config(config_path: Optional[str] = None, preset: Optional[str] = None) -> Config:
    """Resolve configuration; a preset takes precedence over a config file."""
    if preset:
        return Config.load_preset(preset)
    if config_path:
        return Config.load(Path(config_path))
    return Config.load()


@server.list_tools()
async def handle_list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="scan_project",
            description=(
                "Scan a Unity project for materials and the shaders they use. "
                "Each distinct shader gets a heuristic profile: apparent shader "
                "model target, precision, estimated instruction count and texture "
                "samples, plus the materials using it. Built-in shaders are "
                "skipped. The result replaces any previous scan."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "project_path": {
                        "type": "string",
                        "description": "Path to the Unity project directory (containing Assets/)"
                    },
                    "config_path": {
                        "type": "string",
                        "description": "Optional path to custom configuration file"
                    },
                    "preset": {
                        "type": "string",
                        "enum": ["mobile", "pc"],
                        "description": "Optional threshold preset. Takes precedence over config_path."
                    },
                    "output_dir": {
                        "type": "string",
                        "description": "Optional directory to write JSON and Markdown reports to"
                    }
                },
                "required": ["project_path"]
            }
        ),
        Tool(
            name="filter_by_model",
            description=(
                "List the shaders from the latest scan whose apparent shader "
                "model matches the given value."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "shading_model": {
                        "type": "string",
                        "enum": [m.value for m in ShadingModel],
                        "description": "Shader model to filter by, e.g. '3.0'"
                    }
                },
                "required": ["shading_model"]
            }
        ),
        Tool(
            name="get_shader_profile",
            description=(
                "Show the profile of one shader from the latest scan, including "
                "every material that uses it. If several shaders share the name, "
                "each profile is listed with its asset path."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "shader_name": {
                        "type": "string",
                        "description": "Shader name as reported by scan_project"
                    }
                },
                "required": ["shader_name"]
            }
        ),
    ]


@server.call_tool()
async def handle_call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent | ImageContent | EmbeddedResource]:
    """Handle tool calls."""
    if name == "scan_project":
        return await scan_project(arguments)
    elif name == "filter_by_model":
        return await filter_by_model(arguments)
    elif name == "get_shader_profile":
        return await get_shader_profile(arguments)
    else:
        raise ValueError(f"Unknown tool: {name}")


async def scan_project(arguments: dict[str, Any]) -> list[TextContent]:
    """Scan a project and hold the result as the current snapshot.

    Args:
        arguments: Tool arguments containing project_path and optional
                   config_path, preset and output_dir

    Returns:
        TextContent containing the scan summary
    """
    project_path = arguments.get("project_path")
    if not project_path:
        raise ValueError("project_path is required")

    try:
        config = load_config(arguments.get("config_path"), arguments.get("preset"))
        assets = UnityProjectAssets(project_path, builtin_prefix=config.scan.builtin_prefix)
        index = ShaderUsageAggregator(assets).scan()
        set_current_index(index)

        issues = ShaderUsageDetector(config.thresholds).detect(index)
        output = format_scan_result(index, issues, verbose=config.output.verbose)

        output_dir = arguments.get("output_dir")
        if output_dir:
            paths = ReportGenerator(project_path, index, issues, config.output).save_all(Path(output_dir))
            output += f"\n\nReports written:\n- {paths['json']}\n- {paths['markdown']}"

        return [TextContent(type="text", text=output)]

    except FileNotFoundError as e:
        return [TextContent(type="text", text=f"Error: Not found - {e}")]
    except ValueError as e:
        return [TextContent(type="text", text=f"Error: Invalid input - {e}")]
    except Exception as e:
        return [TextContent(type="text", text=f"Error: Scan failed - {e}")]


async def filter_by_model(arguments: dict[str, Any]) -> list[TextContent]:
    """List shaders of the current snapshot with the given shader model."""
    shading_model = arguments.get("shading_model")
    if not shading_model:
        raise ValueError("shading_model is required")

    index = get_current_index()
    if index is None:
        return [TextContent(type="text", text=NO_SCAN_MESSAGE)]

    try:
        shaders = query_by_model(index, shading_model)
    except ValueError:
        return [TextContent(type="text", text=f"Error: Unknown shader model '{shading_model}'")]

    return [TextContent(type="text", text=format_filter_result(shading_model, shaders))]


async def get_shader_profile(arguments: dict[str, Any]) -> list[TextContent]:
    """Show the profile(s) matching a shader name in the current snapshot."""
    shader_name = arguments.get("shader_name")
    if not shader_name:
        raise ValueError("shader_name is required")

    index = get_current_index()
    if index is None:
        return [TextContent(type="text", text=NO_SCAN_MESSAGE)]

    shaders = find_shaders(index, shader_name)
    if not shaders:
        return [TextContent(type="text", text=f"Shader not found in latest scan: {shader_name}")]

    if len(shaders) == 1:
        shader = shaders[0]
        return [TextContent(type="text", text=format_profile(shader, index[shader], with_materials=True))]

    # Distinct assets declaring the same name; show each with its path
    lines = [f"{len(shaders)} shaders share the name {shader_name}:", ""]
    for shader in shaders:
        lines.append(format_profile(shader, index[shader], with_materials=True))
        lines.append("")
    return [TextContent(type="text", text="\n".join(lines).rstrip())]


def format_profile(shader: ShaderHandle, profile: ShaderProfile, with_materials: bool = False) -> str:
    lines = [
        f"### {shader.name}",
        f"- Path: {shader.asset_path or '(unresolved)'}",
        f"- Shader Model: {profile.shading_model.value}",
        f"- Precision: {profile.precision.value}",
        f"- Instruction Count: {profile.instruction_count}",
        f"- Texture Samples: {profile.texture_sample_count}",
        f"- Materials: {len(profile.materials)}",
    ]
    if with_materials:
        for material in profile.materials:
            lines.append(f"  - {material.name} ({material.asset_path})")
    return "\n".join(lines)


def format_scan_result(index: ProfileIndex, issues: List[Issue], verbose: bool = False) -> str:
    """Format a scan snapshot for display."""
    lines = [
        "# Shader Usage Scan",
        "",
        f"Unique Shader Count: {len(index)}",
        f"Material References: {index.material_count}",
        "",
    ]

    if len(index) == 0:
        lines.append("No shaders found.")
        return "\n".join(lines)

    for shader, profile in index.items():
        lines.append(format_profile(shader, profile, with_materials=verbose))
        lines.append("")

    if issues:
        lines.append(f"## Highlighted ({len(issues)})")
        for issue in issues:
            lines.append(f"- [{issue.type}] {issue.description}")

    return "\n".join(lines).rstrip()


def format_filter_result(shading_model: str, shaders: List[ShaderHandle]) -> str:
    if not shaders:
        return f"No shaders found using shader model {shading_model}."
    lines = [f"Shaders using shader model {shading_model} ({len(shaders)}):"]
    for shader in shaders:
        lines.append(f"- {shader.name}")
    return "\n".join(lines)


async def main():
    """Main entry point for the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name="shader-usage",
                server_version=__version__,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                )
            )
        )


if __name__ == "__main__":
    asyncio.run(main())
