# su_mcp/assets/base.py
from typing import Dict, Iterable, Iterator, List, Optional, Protocol

from su_mcp.models import MaterialHandle, ShaderHandle

DEFAULT_BUILTIN_PREFIX = "Resources/unity_builtin_extra"


class AssetSource(Protocol):
    """Enumerates materials and recognises built-in shaders."""

    def iter_materials(self) -> Iterable[MaterialHandle]:
        """Yield every material known to the project, in a stable order."""
        ...

    def is_builtin(self, shader: ShaderHandle) -> bool:
        """Return True if the shader ships with the engine rather than the project."""
        ...


class ShaderTextSource(Protocol):
    """Supplies shader source text."""

    def read_text(self, shader: ShaderHandle) -> Optional[str]:
        """Return the shader's source text, or None if it cannot be read."""
        ...


def is_builtin_path(asset_path: Optional[str], prefix: str = DEFAULT_BUILTIN_PREFIX) -> bool:
    return asset_path is not None and asset_path.startswith(prefix)


class InMemoryAssets:
    """List-backed asset and text source.

    Example:
        >>> shader = ShaderHandle("Custom/Water", "Assets/Water.shader")
        >>> assets = InMemoryAssets(
        ...     [MaterialHandle("Lake", shader=shader)],
        ...     {shader: "#pragma target 3.0"},
        ... )
    """

    def __init__(
        self,
        materials: Optional[List[MaterialHandle]] = None,
        sources: Optional[Dict[ShaderHandle, str]] = None,
        builtin_prefix: str = DEFAULT_BUILTIN_PREFIX
    ):
        self.materials = list(materials or [])
        self.sources = dict(sources or {})
        self.builtin_prefix = builtin_prefix

    def iter_materials(self) -> Iterator[MaterialHandle]:
        return iter(self.materials)

    def is_builtin(self, shader: ShaderHandle) -> bool:
        return is_builtin_path(shader.asset_path, self.builtin_prefix)

    def read_text(self, shader: ShaderHandle) -> Optional[str]:
        return self.sources.get(shader)
