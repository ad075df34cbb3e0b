# su_mcp/query.py
from su_mcp.models import ProfileIndex, ShaderHandle, ShadingModel
from typing import List, Optional, Union


def filter_by_model(index: ProfileIndex, shading_model: Union[ShadingModel, str]) -> List[ShaderHandle]:
    """Return the shaders whose profile carries the given shading model.

    Args:
        index: Snapshot produced by a scan
        shading_model: ShadingModel member or its value, e.g. "3.0"

    Returns:
        Matching shaders in index iteration order; empty if none match

    Raises:
        ValueError: If shading_model is not a known shading model value
    """
    tag = ShadingModel(shading_model)
    return [shader for shader, profile in index.items() if profile.shading_model == tag]


def find_shader(index: ProfileIndex, name: str) -> Optional[ShaderHandle]:
    return index.find_by_name(name)


def find_shaders(index: ProfileIndex, name: str) -> List[ShaderHandle]:
    """Return every shader carrying the given display name."""
    return index.find_all_by_name(name)
