# su_mcp/aggregator.py
from su_mcp.assets.base import AssetSource, ShaderTextSource
from su_mcp.classifier import classify
from su_mcp.models import ProfileIndex, ShaderHandle, ShaderProfile
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)


class ShaderUsageAggregator:
    """Builds a ProfileIndex from the materials of a project.

    Each distinct shader is classified once, from the text the text source
    returns at the moment it is first seen. Built-in shaders and materials
    without a shader are left out of the index.
    """

    def __init__(self, asset_source: AssetSource, text_source: Optional[ShaderTextSource] = None):
        """Initialize the aggregator.

        Args:
            asset_source: Enumerates materials and recognises built-in shaders
            text_source: Supplies shader source text. Defaults to asset_source
                         when it also implements ``read_text``.
        """
        self.asset_source = asset_source
        self.text_source = text_source if text_source is not None else asset_source

    def scan(self) -> ProfileIndex:
        """Scan every material and return a fresh profile snapshot.

        Returns:
            ProfileIndex with one entry per distinct non-built-in shader
        """
        profiles: Dict[ShaderHandle, ShaderProfile] = {}

        for material in self.asset_source.iter_materials():
            if material is None or material.shader is None:
                continue

            shader = material.shader
            if self.asset_source.is_builtin(shader):
                continue

            profile = profiles.get(shader)
            if profile is None:
                profile = ShaderProfile.from_classification(classify(self._read_source(shader)))
                profiles[shader] = profile

            profile.materials.append(material)

        logger.info("Shader scan completed. Found %d shaders.", len(profiles))
        return ProfileIndex(profiles)

    def _read_source(self, shader: ShaderHandle) -> Optional[str]:
        try:
            source = self.text_source.read_text(shader)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Treating source of {shader.name} as unavailable: {e}")
            return None
        if source is None:
            logger.debug(f"No source text for shader {shader.name}")
        return source


def scan(asset_source: AssetSource, text_source: Optional[ShaderTextSource] = None) -> ProfileIndex:
    """Run a single scan with a throwaway aggregator."""
    return ShaderUsageAggregator(asset_source, text_source).scan()
