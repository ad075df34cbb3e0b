# su_mcp/detectors/shader_usage.py
"""Highlighting of heavy or high-tier shaders.

Flags the profiles worth a second look: estimated instruction counts above
the limit, float precision, and shader model targets at or above the
configured tier.
"""
from typing import List

from su_mcp.detectors.base import BaseDetector
from su_mcp.models import Issue, IssueSeverity, Precision, ProfileIndex, ShadingModel

_MODEL_ORDER = list(ShadingModel)


def shading_model_rank(model: ShadingModel) -> int:
    """Position of a model in ascending tier order; Unknown ranks lowest."""
    return _MODEL_ORDER.index(model)


class ShaderUsageDetector(BaseDetector):
    """Detector for shader profiles that exceed the configured thresholds."""

    @property
    def name(self) -> str:
        return "shader_usage"

    def detect(self, index: ProfileIndex) -> List[Issue]:
        issues = []
        warn_rank = shading_model_rank(ShadingModel(self.thresholds.warn_shading_model))

        for shader, profile in index.items():
            location = f"Shader: {shader.name}"
            users = len(profile.materials)

            if profile.instruction_count > self.thresholds.max_instruction_count:
                issues.append(Issue(
                    type="heavy_shader",
                    severity=IssueSeverity.WARNING,
                    description=(
                        f"Shader {shader.name} has an estimated {profile.instruction_count} "
                        f"instructions, above the limit of {self.thresholds.max_instruction_count} "
                        f"({users} materials)"
                    ),
                    location=location,
                    impact="high" if users > 1 else "medium"
                ))

            if self.thresholds.flag_float_precision and profile.precision == Precision.FLOAT:
                issues.append(Issue(
                    type="float_precision",
                    severity=IssueSeverity.WARNING,
                    description=f"Shader {shader.name} appears to use full float precision; consider half",
                    location=location,
                    impact="medium"
                ))

            if (profile.shading_model != ShadingModel.UNKNOWN
                    and shading_model_rank(profile.shading_model) >= warn_rank):
                issues.append(Issue(
                    type="high_shading_model",
                    severity=IssueSeverity.WARNING,
                    description=(
                        f"Shader {shader.name} targets shader model {profile.shading_model.value}, "
                        f"at or above {self.thresholds.warn_shading_model}"
                    ),
                    location=location,
                    impact="medium"
                ))

        return issues
