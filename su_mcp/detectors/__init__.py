"""Detectors that highlight notable shader profiles."""

from su_mcp.detectors.base import BaseDetector
from su_mcp.detectors.shader_usage import ShaderUsageDetector

__all__ = ["BaseDetector", "ShaderUsageDetector"]
