import json
import tempfile
from pathlib import Path
import pytest

from su_mcp.config import Config, OutputConfig, ScanOptions, Thresholds, DEFAULT_CONFIG_PATH


class TestThresholdsValidation:
    """Test validation of threshold values."""

    def test_default_thresholds_are_valid(self):
        thresholds = Thresholds()
        assert thresholds.max_instruction_count == 450
        assert thresholds.warn_shading_model == "4.0"
        assert thresholds.flag_float_precision is True

    def test_max_instruction_count_must_be_non_negative(self):
        with pytest.raises(ValueError, match="max_instruction_count must be non-negative"):
            Thresholds(max_instruction_count=-1)

        # Should not raise for zero
        assert Thresholds(max_instruction_count=0).max_instruction_count == 0

    def test_warn_shading_model_must_be_known(self):
        with pytest.raises(ValueError, match="warn_shading_model must be one of"):
            Thresholds(warn_shading_model="7.0")

    def test_warn_shading_model_rejects_unknown(self):
        with pytest.raises(ValueError, match="warn_shading_model"):
            Thresholds(warn_shading_model="unknown")

    def test_to_dict(self):
        assert Thresholds().to_dict() == {
            "max_instruction_count": 450,
            "warn_shading_model": "4.0",
            "flag_float_precision": True,
        }


class TestScanOptions:
    """Test scan option validation."""

    def test_default_prefix(self):
        assert ScanOptions().builtin_prefix == "Resources/unity_builtin_extra"

    def test_empty_prefix_rejected(self):
        with pytest.raises(ValueError, match="builtin_prefix must not be empty"):
            ScanOptions(builtin_prefix="")


class TestConfigLoading:
    """Test configuration loading from files."""

    def test_load_default_config_when_file_missing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = Config.load(Path(tmpdir) / "nonexistent.json")

            assert isinstance(config.thresholds, Thresholds)
            assert isinstance(config.scan, ScanOptions)
            assert isinstance(config.output, OutputConfig)
            assert config.thresholds.max_instruction_count == 450
            assert config.output.include_materials is True

    def test_load_without_path_uses_default_location(self, tmp_path, monkeypatch):
        default_path = tmp_path / "config.json"
        default_path.write_text(json.dumps({"output": {"include_materials": False}}))
        monkeypatch.setattr("su_mcp.config.DEFAULT_CONFIG_PATH", default_path)

        config = Config.load()

        assert config.output.include_materials is False
        assert DEFAULT_CONFIG_PATH.name == "config.json"

    def test_load_valid_config_file(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({
            "thresholds": {"max_instruction_count": 300, "flag_float_precision": False},
            "scan": {"builtin_prefix": "Library/"},
            "output": {"verbose": True}
        }))

        config = Config.load(config_path)

        assert config.thresholds.max_instruction_count == 300
        assert config.thresholds.flag_float_precision is False
        assert config.thresholds.warn_shading_model == "4.0"
        assert config.scan.builtin_prefix == "Library/"
        assert config.output.verbose is True

    def test_invalid_json_raises_value_error(self, tmp_path):
        config_path = tmp_path / "broken.json"
        config_path.write_text("{ not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            Config.load(config_path)

    def test_invalid_value_in_file(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"thresholds": {"max_instruction_count": -5}}))
        with pytest.raises(ValueError, match="max_instruction_count"):
            Config.load(config_path)

    def test_unknown_key_raises_value_error(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"thresholds": {"max_instructions": 10}}))
        with pytest.raises(ValueError, match="Invalid key in config section 'thresholds'"):
            Config.load(config_path)

    def test_non_object_section_raises_value_error(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"thresholds": 5}))
        with pytest.raises(ValueError, match="Config section 'thresholds' must be an object, got int"):
            Config.load(config_path)

    def test_non_object_document_raises_value_error(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps([1, 2]))
        with pytest.raises(ValueError, match="must contain a JSON object"):
            Config.load(config_path)

    def test_file_naming_preset_with_overrides(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({
            "preset": "mobile",
            "thresholds": {"max_instruction_count": 123}
        }))

        config = Config.load(config_path)

        assert config.thresholds.max_instruction_count == 123
        assert config.thresholds.warn_shading_model == "4.0"


class TestPresets:
    """Test preset loading."""

    def test_mobile_preset(self):
        config = Config.load_preset("mobile")
        assert config.thresholds.max_instruction_count == 200
        assert config.thresholds.flag_float_precision is True

    def test_pc_preset(self):
        config = Config.load_preset("pc")
        assert config.thresholds.max_instruction_count == 800
        assert config.thresholds.warn_shading_model == "6.0"
        assert config.thresholds.flag_float_precision is False

    def test_preset_overrides(self):
        config = Config.load_preset("pc", {"thresholds": {"warn_shading_model": "5.0"}, "output": {"verbose": True}})
        assert config.thresholds.warn_shading_model == "5.0"
        assert config.thresholds.max_instruction_count == 800
        assert config.output.verbose is True

    def test_unknown_preset(self):
        with pytest.raises(FileNotFoundError, match="Preset not found: console"):
            Config.load_preset("console")
