"""Shader usage profiling for Unity projects, served over MCP."""

__version__ = "0.1.0"
