# su_mcp/assets/__init__.py
"""Asset collaborators for shader usage scans.

The scan core only talks to the ``AssetSource`` and ``ShaderTextSource``
protocols; ``UnityProjectAssets`` implements both over a Unity project tree.
"""

from su_mcp.assets.base import (
    DEFAULT_BUILTIN_PREFIX,
    AssetSource,
    InMemoryAssets,
    ShaderTextSource,
    is_builtin_path,
)
from su_mcp.assets.unity import UnityProjectAssets

__all__ = [
    "DEFAULT_BUILTIN_PREFIX",
    "AssetSource",
    "InMemoryAssets",
    "ShaderTextSource",
    "is_builtin_path",
    "UnityProjectAssets",
]
