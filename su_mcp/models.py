# su_mcp/models.py
from collections.abc import Mapping
from enum import Enum
from pydantic import BaseModel, Field
from typing import Any, Dict, Iterator, List, Optional


class ShadingModel(str, Enum):
    UNKNOWN = "unknown"
    SM_2_0 = "2.0"
    SM_2_5 = "2.5"
    SM_3_0 = "3.0"
    SM_3_5 = "3.5"
    SM_4_0 = "4.0"
    SM_4_5 = "4.5"
    SM_5_0 = "5.0"
    SM_5_1 = "5.1"
    SM_6_0 = "6.0"
    SM_6_2 = "6.2"


class Precision(str, Enum):
    UNKNOWN = "unknown"
    HALF = "half"
    FLOAT = "float"
    FIXED = "fixed"


class IssueSeverity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    SUGGESTION = "suggestion"


class ShaderHandle:
    """Opaque reference to a shader asset.

    Two handles are equal only if they are the same object, so the asset
    source must hand out one handle per shader asset.
    """

    __slots__ = ("name", "asset_path")

    def __init__(self, name: str, asset_path: Optional[str] = None):
        self.name = name
        self.asset_path = asset_path

    def __repr__(self) -> str:
        return f"ShaderHandle(name={self.name!r}, asset_path={self.asset_path!r})"


class MaterialHandle:
    """Opaque reference to a material asset and the shader it uses."""

    __slots__ = ("name", "asset_path", "shader")

    def __init__(
        self,
        name: str,
        asset_path: Optional[str] = None,
        shader: Optional[ShaderHandle] = None
    ):
        self.name = name
        self.asset_path = asset_path
        self.shader = shader

    def __repr__(self) -> str:
        return f"MaterialHandle(name={self.name!r}, asset_path={self.asset_path!r})"


class Issue(BaseModel):
    """Represents a highlighted shader profile."""
    type: str = Field(description="Type identifier for the issue")
    severity: IssueSeverity = Field(description="Severity level of the issue")
    description: str = Field(description="Human-readable description of the issue")
    location: str = Field(description="Shader the issue was raised for")
    impact: str = Field(default="medium", description="Performance impact level")

    model_config = {"extra": "forbid"}


class ShaderClassification(BaseModel):
    """Heuristic tags computed from one shader's source text."""
    shading_model: ShadingModel = Field(default=ShadingModel.UNKNOWN, description="Apparent shader model target")
    precision: Precision = Field(default=Precision.UNKNOWN, description="Apparent numeric precision")
    instruction_count: int = Field(default=0, ge=0, description="Estimated arithmetic instruction count")
    texture_sample_count: int = Field(default=0, ge=0, description="Estimated texture sample count")

    model_config = {"extra": "forbid", "frozen": True}


class ShaderProfile(BaseModel):
    """Per-shader record of a scan.

    The classification fields are fixed at creation; only ``materials``
    grows while the scan is running.
    """
    shading_model: ShadingModel = Field(description="Apparent shader model target")
    precision: Precision = Field(description="Apparent numeric precision")
    instruction_count: int = Field(ge=0, description="Estimated arithmetic instruction count")
    texture_sample_count: int = Field(ge=0, description="Estimated texture sample count")
    materials: List[MaterialHandle] = Field(
        default_factory=list,
        description="Materials referencing the shader, in discovery order"
    )

    model_config = {"extra": "forbid", "frozen": True, "arbitrary_types_allowed": True}

    @classmethod
    def from_classification(cls, classification: ShaderClassification) -> "ShaderProfile":
        return cls(**classification.model_dump(), materials=[])


class ProfileIndex(Mapping):
    """Read-only snapshot mapping each distinct shader to its profile.

    Keys are ``ShaderHandle`` objects compared by identity. Iteration follows
    first-observation order, but callers should not rely on it.
    """

    def __init__(self, profiles: Optional[Dict[ShaderHandle, ShaderProfile]] = None):
        self._profiles: Dict[ShaderHandle, ShaderProfile] = dict(profiles or {})

    def __getitem__(self, shader: ShaderHandle) -> ShaderProfile:
        return self._profiles[shader]

    def __iter__(self) -> Iterator[ShaderHandle]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def __repr__(self) -> str:
        return f"ProfileIndex({len(self)} shaders)"

    @property
    def material_count(self) -> int:
        """Total number of material observations across all shaders."""
        return sum(len(profile.materials) for profile in self._profiles.values())

    def find_by_name(self, name: str) -> Optional[ShaderHandle]:
        """First shader with the given display name, or None."""
        for shader in self._profiles:
            if shader.name == name:
                return shader
        return None

    def find_all_by_name(self, name: str) -> List[ShaderHandle]:
        """Every shader with the given display name, in iteration order.

        Distinct shader assets may declare the same name, so a lookup by
        name can match more than one key.
        """
        return [shader for shader in self._profiles if shader.name == name]

    def to_records(self) -> List[Dict[str, Any]]:
        """Plain-data rows, one per shader, for serialization."""
        records = []
        for shader, profile in self._profiles.items():
            data = {"name": shader.name, "asset_path": shader.asset_path}
            data.update(profile.model_dump(mode="json", exclude={"materials"}))
            data["materials"] = [m.name for m in profile.materials]
            records.append(data)
        return records
