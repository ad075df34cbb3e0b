# su_mcp/tests/test_aggregator.py
import logging
import pytest
from unittest.mock import Mock

from su_mcp.aggregator import ShaderUsageAggregator, scan
from su_mcp.assets import InMemoryAssets
from su_mcp.models import MaterialHandle, Precision, ShaderHandle, ShadingModel


BUILTIN_PATH = "Resources/unity_builtin_extra"

S1_SOURCE = """
#pragma target 3.0
float4 frag (v2f i) : SV_Target
{
    float3 n = dot(i.normal, _LightDir);
    float4 a = tex2D(_MainTex, i.uv);
    float4 b = tex2D(_Mask, i.uv);
    return mul(a, b);
}
"""


def _material(name, shader):
    return MaterialHandle(name=name, asset_path=f"Assets/{name}.mat", shader=shader)


class TestShaderUsageAggregator:
    """Test suite for ShaderUsageAggregator.scan."""

    def test_end_to_end_scenario(self):
        """M1, M2 share S1 (readable); M3 uses S2 (unreadable)."""
        s1 = ShaderHandle("S1", "Assets/S1.shader")
        s2 = ShaderHandle("S2", "Assets/S2.shader")
        m1, m2, m3 = _material("M1", s1), _material("M2", s1), _material("M3", s2)
        assets = InMemoryAssets([m1, m2, m3], {s1: S1_SOURCE})

        index = ShaderUsageAggregator(assets).scan()

        assert len(index) == 2
        p1 = index[s1]
        assert p1.shading_model == ShadingModel.SM_3_0
        assert p1.precision == Precision.FLOAT
        assert p1.instruction_count == 2
        assert p1.texture_sample_count == 2
        assert p1.materials == [m1, m2]

        p2 = index[s2]
        assert p2.shading_model == ShadingModel.UNKNOWN
        assert p2.precision == Precision.UNKNOWN
        assert p2.instruction_count == 0
        assert p2.texture_sample_count == 0
        assert p2.materials == [m3]

    def test_dedup_keeps_observation_order(self):
        shader = ShaderHandle("Shared", "Assets/Shared.shader")
        materials = [_material(f"M{i}", shader) for i in range(5)]
        index = scan(InMemoryAssets(materials, {shader: "half4 c;"}))

        assert list(index) == [shader]
        assert index[shader].materials == materials

    def test_same_material_observed_twice(self):
        shader = ShaderHandle("Shared", "Assets/Shared.shader")
        material = _material("Twice", shader)
        index = scan(InMemoryAssets([material, material]))
        assert index[shader].materials == [material, material]

    def test_identity_not_name_is_the_key(self):
        """Two handles with the same name and path are still two shaders."""
        a = ShaderHandle("Dup", "Assets/Dup.shader")
        b = ShaderHandle("Dup", "Assets/Dup.shader")
        index = scan(InMemoryAssets([_material("A", a), _material("B", b)]))
        assert len(index) == 2

    def test_builtin_shader_excluded(self):
        builtin = ShaderHandle("Standard", BUILTIN_PATH)
        custom = ShaderHandle("Custom", "Assets/Custom.shader")
        materials = [_material(f"B{i}", builtin) for i in range(3)]
        materials.append(_material("C", custom))
        text_source = Mock()
        text_source.read_text.return_value = None

        index = ShaderUsageAggregator(InMemoryAssets(materials), text_source).scan()

        assert builtin not in index
        assert list(index) == [custom]
        text_source.read_text.assert_called_once_with(custom)

    def test_material_without_shader_skipped(self):
        index = scan(InMemoryAssets([MaterialHandle("Orphan"), None]))
        assert len(index) == 0

    def test_source_read_once_per_shader(self):
        shader = ShaderHandle("Once", "Assets/Once.shader")
        text_source = Mock()
        text_source.read_text.return_value = "#pragma target 4.5"
        materials = [_material(f"M{i}", shader) for i in range(4)]

        index = ShaderUsageAggregator(InMemoryAssets(materials), text_source).scan()

        assert text_source.read_text.call_count == 1
        assert index[shader].shading_model == ShadingModel.SM_4_5

    def test_text_source_oserror_degrades_to_defaults(self, caplog):
        shader = ShaderHandle("Locked", "Assets/Locked.shader")
        text_source = Mock()
        text_source.read_text.side_effect = PermissionError("denied")

        with caplog.at_level(logging.WARNING, logger="su_mcp.aggregator"):
            index = ShaderUsageAggregator(InMemoryAssets([_material("M", shader)]), text_source).scan()

        assert index[shader].shading_model == ShadingModel.UNKNOWN
        assert index[shader].instruction_count == 0
        assert "Locked" in caplog.text

    def test_deterministic(self):
        s1 = ShaderHandle("S1", "Assets/S1.shader")
        s2 = ShaderHandle("S2", "Assets/S2.shader")
        assets = InMemoryAssets(
            [_material("M1", s1), _material("M2", s2), _material("M3", s1)],
            {s1: S1_SOURCE, s2: "#pragma target 5.0\nfixed4 c;"}
        )

        first = scan(assets)
        second = scan(assets)

        assert set(first) == set(second)
        for shader in first:
            assert first[shader].model_dump() == second[shader].model_dump()

    def test_each_scan_returns_new_index(self):
        shader = ShaderHandle("S", "Assets/S.shader")
        assets = InMemoryAssets([_material("M", shader)])
        aggregator = ShaderUsageAggregator(assets)

        first = aggregator.scan()
        second = aggregator.scan()

        assert first is not second
        assert first[shader] is not second[shader]
        assert len(first[shader].materials) == 1

    def test_logs_shader_count(self, caplog):
        shader = ShaderHandle("S", "Assets/S.shader")
        with caplog.at_level(logging.INFO, logger="su_mcp.aggregator"):
            scan(InMemoryAssets([_material("M", shader)]))
        assert "Found 1 shaders" in caplog.text

    def test_empty_project(self):
        index = scan(InMemoryAssets())
        assert len(index) == 0
        assert index.material_count == 0
