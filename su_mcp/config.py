import json
from pathlib import Path
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from su_mcp.assets.base import DEFAULT_BUILTIN_PREFIX
from su_mcp.models import ShadingModel

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.json"
PRESET_DIR = Path(__file__).parent / "presets"


@dataclass
class Thresholds:
    """Limits above which a shader profile is highlighted."""
    max_instruction_count: int = 450
    warn_shading_model: str = "4.0"
    flag_float_precision: bool = True

    def __post_init__(self):
        if self.max_instruction_count < 0:
            raise ValueError(f"max_instruction_count must be non-negative, got {self.max_instruction_count}")
        valid = [m.value for m in ShadingModel if m is not ShadingModel.UNKNOWN]
        if self.warn_shading_model not in valid:
            raise ValueError(
                f"warn_shading_model must be one of {', '.join(valid)}, got {self.warn_shading_model!r}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ScanOptions:
    """Options for discovering project assets."""
    builtin_prefix: str = DEFAULT_BUILTIN_PREFIX

    def __post_init__(self):
        if not self.builtin_prefix:
            raise ValueError("builtin_prefix must not be empty")


@dataclass
class OutputConfig:
    """Output configuration options."""
    include_materials: bool = True
    verbose: bool = False


@dataclass
class Config:
    """
    Main configuration with preset support.

    Supports loading from:
    - Preset configurations (mobile, pc)
    - Custom config files
    - Default values
    """
    thresholds: Thresholds = field(default_factory=Thresholds)
    scan: ScanOptions = field(default_factory=ScanOptions)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """
        Build a Config from a parsed JSON document.

        Args:
            data: Dict with optional "thresholds", "scan" and "output" sections

        Returns:
            Config instance

        Raises:
            ValueError: If a section is not an object, has unknown keys or
                        contains invalid values
        """
        return cls(
            thresholds=cls._build_section(Thresholds, "thresholds", data),
            scan=cls._build_section(ScanOptions, "scan", data),
            output=cls._build_section(OutputConfig, "output", data),
        )

    @staticmethod
    def _build_section(section_cls, name: str, data: Dict[str, Any]):
        values = data.get(name, {})
        if not isinstance(values, dict):
            raise ValueError(f"Config section '{name}' must be an object, got {type(values).__name__}")
        try:
            return section_cls(**values)
        except TypeError as e:
            raise ValueError(f"Invalid key in config section '{name}': {e}") from e

    @staticmethod
    def _read_json(path: Path) -> Dict[str, Any]:
        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {path}: {e}")
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")
        return data

    @classmethod
    def load_preset(cls, name: str, overrides: Optional[Dict[str, Dict[str, Any]]] = None) -> "Config":
        """
        Load a preset configuration.

        Args:
            name: Preset name (e.g., 'mobile')
            overrides: Optional per-section overrides merged over the preset

        Returns:
            Config instance with preset loaded

        Raises:
            FileNotFoundError: If preset file doesn't exist
        """
        preset_file = PRESET_DIR / f"{name}.json"
        if not preset_file.exists():
            raise FileNotFoundError(f"Preset not found: {name}")

        data = cls._read_json(preset_file)

        # Deep merge overrides
        if overrides:
            for section, values in overrides.items():
                if section in data:
                    data[section].update(values)
                else:
                    data[section] = values

        return cls.from_dict(data)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """
        Load config from file or use defaults.

        A file may name a "preset" and override parts of it, or spell out
        the sections directly.

        Args:
            path: Optional path to config file

        Returns:
            Config instance

        Raises:
            ValueError: If JSON is invalid
        """
        config_path = Path(path) if path else DEFAULT_CONFIG_PATH
        if not config_path.exists():
            return cls()

        data = cls._read_json(config_path)

        if "preset" in data:
            overrides = {k: v for k, v in data.items() if isinstance(v, dict)}
            return cls.load_preset(data["preset"], overrides)

        return cls.from_dict(data)
