"""Tests for configuration loading and validation."""

import json
import tempfile
from pathlib import Path

import pytest
import yaml

from sounding_viewer.utils.config import (
    SoundingConfig,
    create_default_config,
    load_config,
    validate_config,
)


class TestSoundingConfig:
    """Tests for the configuration dataclasses."""

    def test_defaults(self):
        config = SoundingConfig()
        assert config.parcel.pressure_step == 1.0
        assert config.parcel.thickness_intervals == 2
        assert config.indices.most_unstable_top == 500.0
        assert config.indices.inflow_cape_min == 100.0
        assert config.indices.inflow_cin_min == -250.0
        assert config.indices.pw_intervals == 200
        assert config.output.format == "table"

    def test_default_config_valid(self):
        assert validate_config(SoundingConfig()) == []

    def test_to_dict(self):
        data = SoundingConfig(name="storm").to_dict()
        assert data["name"] == "storm"
        assert data["parcel"]["pressure_step"] == 1.0
        assert data["indices"]["bunkers_deviation"] == 7.5


class TestLoadConfig:
    """Tests for reading configuration files."""

    def test_yaml_round_trip(self, tmp_path):
        config = SoundingConfig(name="yaml_test")
        config.parcel.pressure_step = 2.5
        config.indices.helicity_step = 25.0
        path = tmp_path / "config.yaml"
        config.to_yaml(path)

        loaded = load_config(path)
        assert loaded.name == "yaml_test"
        assert loaded.parcel.pressure_step == 2.5
        assert loaded.indices.helicity_step == 25.0

    def test_json_round_trip(self, tmp_path):
        config = SoundingConfig(name="json_test")
        config.output.format = "csv"
        path = tmp_path / "config.json"
        config.to_json(path)

        loaded = load_config(path)
        assert loaded.name == "json_test"
        assert loaded.output.format == "csv"

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "partial.yml"
        path.write_text(yaml.dump({"name": "partial", "parcel": {"pressure_step": 5.0}}))

        loaded = load_config(path)
        assert loaded.parcel.pressure_step == 5.0
        assert loaded.parcel.thickness_intervals == 2
        assert loaded.indices.pw_intervals == 200

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path).name == "unnamed_sounding"

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"parcel": {"step_size": 1.0}}))
        with pytest.raises(TypeError):
            load_config(path)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_config("does_not_exist.yaml")

    def test_unsupported_format(self):
        with tempfile.NamedTemporaryFile(suffix=".toml", delete=False) as f:
            path = f.name
        try:
            with pytest.raises(ValueError):
                load_config(path)
        finally:
            Path(path).unlink(missing_ok=True)

    def test_create_default_config(self, tmp_path):
        path = tmp_path / "sounding_config.yaml"
        config = create_default_config(path)
        assert path.exists()
        assert config.name == "default_sounding"
        assert load_config(path).name == "default_sounding"


class TestValidateConfig:
    """Tests for configuration validation."""

    def test_non_positive_step(self):
        config = SoundingConfig()
        config.parcel.pressure_step = 0
        issues = validate_config(config)
        assert any("pressure step" in issue for issue in issues)

    def test_positive_cin_threshold(self):
        config = SoundingConfig()
        config.indices.inflow_cin_min = 10
        assert len(validate_config(config)) == 1

    def test_unknown_output_format(self):
        config = SoundingConfig()
        config.output.format = "xml"
        assert any("Output format" in issue for issue in validate_config(config))

    def test_multiple_issues_reported(self):
        config = SoundingConfig()
        config.indices.pw_intervals = 0
        config.indices.helicity_step = -1
        config.output.precision = -1
        assert len(validate_config(config)) == 3
