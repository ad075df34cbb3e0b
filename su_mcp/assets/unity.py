# su_mcp/assets/unity.py
"""Unity project asset source.

Reads text-serialized ``.mat`` files and ``.shader.meta`` files straight from
a Unity project directory, so a scan can run without the editor.
"""
import logging
import re
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from su_mcp.assets.base import DEFAULT_BUILTIN_PREFIX, is_builtin_path
from su_mcp.models import MaterialHandle, ShaderHandle

logger = logging.getLogger(__name__)

# GUIDs Unity reserves for resources bundled with the editor
BUILTIN_GUID_PATHS = {
    "0000000000000000f000000000000000": "Resources/unity_builtin_extra",
    "0000000000000000e000000000000000": "Library/unity default resources",
}

ASSET_SEARCH_DIRS = ("Assets", "Packages")

_NAME_RE = re.compile(r"^\s*m_Name:[ \t]*(.*?)\s*$", re.MULTILINE)
_SHADER_REF_RE = re.compile(
    r"^\s*m_Shader:\s*\{\s*fileID:\s*(-?\d+)(?:\s*,\s*guid:\s*([0-9a-fA-F]+))?",
    re.MULTILINE
)
_META_GUID_RE = re.compile(r"^guid:\s*([0-9a-fA-F]+)", re.MULTILINE)
_SHADER_NAME_RE = re.compile(r'^\s*Shader\s+"([^"]+)"', re.MULTILINE)


class UnityProjectAssets:
    """Asset and shader text source backed by a Unity project on disk.

    Materials are discovered under ``Assets/`` and ``Packages/`` in sorted
    project-relative path order. Each
    distinct shader reference resolves to exactly one ``ShaderHandle`` for
    the lifetime of this object.

    Example:
        >>> assets = UnityProjectAssets("/path/to/MyGame")
        >>> for material in assets.iter_materials():
        ...     print(material.name, material.shader)
    """

    def __init__(self, project_root: str | Path, builtin_prefix: str = DEFAULT_BUILTIN_PREFIX):
        """Initialize the asset source.

        Args:
            project_root: Unity project directory (the one holding ``Assets/``)
            builtin_prefix: Asset path prefix marking engine built-in shaders

        Raises:
            FileNotFoundError: If the project directory does not exist
            ValueError: If the path is not a directory
        """
        self.project_root = Path(project_root).resolve()
        if not self.project_root.exists():
            raise FileNotFoundError(f"Project directory not found: {project_root}")
        if not self.project_root.is_dir():
            raise ValueError(f"Path must be a directory: {project_root}")
        self.builtin_prefix = builtin_prefix
        self._shader_paths: Optional[Dict[str, str]] = None
        self._handles: Dict[Tuple[str, int], ShaderHandle] = {}

    def iter_materials(self) -> Iterator[MaterialHandle]:
        roots = [self.project_root / folder for folder in ASSET_SEARCH_DIRS]
        roots = [root for root in roots if root.is_dir()]
        if not roots:
            logger.warning(f"No {' or '.join(ASSET_SEARCH_DIRS)} directory under {self.project_root}")
            return
        paths = [path for root in roots for path in root.rglob("*.mat")]
        for path in sorted(paths, key=self._relative):
            material = self._load_material(path)
            if material is not None:
                yield material

    def is_builtin(self, shader: ShaderHandle) -> bool:
        return is_builtin_path(shader.asset_path, self.builtin_prefix)

    def read_text(self, shader: ShaderHandle) -> Optional[str]:
        if shader.asset_path is None:
            return None
        path = self.project_root / shader.asset_path
        if not path.is_file():
            logger.debug(f"Shader source not found: {path}")
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Cannot read shader source {path}: {e}")
            return None

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.project_root).as_posix()

    def _load_material(self, path: Path) -> Optional[MaterialHandle]:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable material {path}: {e}")
            return None

        if not content.startswith("%YAML"):
            logger.warning(f"Skipping material not serialized as text: {path}")
            return None

        name_match = _NAME_RE.search(content)
        name = name_match.group(1) if name_match and name_match.group(1) else path.stem

        shader = None
        ref = _SHADER_REF_RE.search(content)
        if ref is not None:
            file_id = int(ref.group(1))
            guid = (ref.group(2) or "").lower()
            if file_id != 0 and guid:
                shader = self._resolve_shader(guid, file_id)

        return MaterialHandle(name=name, asset_path=self._relative(path), shader=shader)

    def _resolve_shader(self, guid: str, file_id: int) -> ShaderHandle:
        key = (guid, file_id)
        handle = self._handles.get(key)
        if handle is not None:
            return handle

        if guid in BUILTIN_GUID_PATHS:
            handle = ShaderHandle(name=f"Builtin/{file_id}", asset_path=BUILTIN_GUID_PATHS[guid])
        else:
            asset_path = self._shader_guid_map().get(guid)
            if asset_path is None:
                logger.debug(f"Shader guid {guid} does not resolve to a project shader")
                handle = ShaderHandle(name=guid, asset_path=None)
            else:
                handle = ShaderHandle(name=Path(asset_path).stem, asset_path=asset_path)
                source = self.read_text(handle)
                if source:
                    match = _SHADER_NAME_RE.search(source)
                    if match:
                        handle.name = match.group(1)

        self._handles[key] = handle
        return handle

    def _shader_guid_map(self) -> Dict[str, str]:
        if self._shader_paths is None:
            self._shader_paths = {}
            for folder in ASSET_SEARCH_DIRS:
                root = self.project_root / folder
                if not root.is_dir():
                    continue
                for meta in sorted(root.rglob("*.shader.meta"), key=lambda p: p.as_posix()):
                    try:
                        match = _META_GUID_RE.search(meta.read_text(encoding="utf-8"))
                    except (OSError, UnicodeDecodeError) as e:
                        logger.warning(f"Skipping unreadable meta file {meta}: {e}")
                        continue
                    if match:
                        shader_path = meta.with_suffix("")
                        self._shader_paths[match.group(1).lower()] = self._relative(shader_path)
        return self._shader_paths
