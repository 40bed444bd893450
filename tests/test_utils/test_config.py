"""Tests for configuration loading and validation."""

import pytest
import yaml

from sonicmind.utils.config import (
    CONFIG_SCHEMA,
    ConfigManager,
    get_default_config,
    load_config,
)
from sonicmind.utils.errors import ConfigurationError


@pytest.fixture
def write_config(tmp_path):
    """Factory: dump a dict as YAML and return its path."""
    def _write(data, name="sonicmind.yaml"):
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data))
        return path
    return _write


class TestConfigManager:
    def test_dot_notation(self):
        config = ConfigManager({"engine": {"max_workers": 8}})

        assert config.get("engine.max_workers") == 8
        assert config.get("engine.seed", default=3) == 3
        assert config.get("missing.key") is None

    def test_required_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigManager({}).get("engine.timeout", required=True)
        assert exc_info.value.config_key == "engine.timeout"

    def test_set_creates_sections(self):
        config = ConfigManager()
        config.set("analyzers.sonic_texture.enabled", False)
        assert config.get_section("analyzers") == {"sonic_texture": {"enabled": False}}

    def test_get_section_non_mapping(self):
        assert ConfigManager({"engine": 5}).get_section("engine") == {}

    def test_merge_defaults_keeps_user_values(self):
        config = ConfigManager({"engine": {"max_workers": 2}})
        config.merge_defaults(get_default_config())

        assert config.get("engine.max_workers") == 2
        assert config.get("engine.parallel") is True
        assert config.get("suggestions.max_suggestions") == 5

    def test_to_dict_is_a_copy(self):
        config = ConfigManager({"engine": {"max_workers": 2}})
        config.to_dict()["engine"]["max_workers"] = 99
        assert config.get("engine.max_workers") == 2

    def test_env_interpolation(self, write_config, monkeypatch):
        monkeypatch.setenv("SONICMIND_LOG_LEVEL", "DEBUG")
        path = write_config({"logging": {"level": "${SONICMIND_LOG_LEVEL}", "file": "${NOT_SET_ANYWHERE}"}})

        config = ConfigManager.from_file(path)

        assert config.get("logging.level") == "DEBUG"
        assert config.get("logging.file") == "${NOT_SET_ANYWHERE}"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigManager.from_file(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("engine: [unclosed")

        with pytest.raises(ConfigurationError, match="parse"):
            ConfigManager.from_file(path)

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigManager.from_file(path)


class TestValidation:
    def test_defaults_are_valid(self):
        ConfigManager(get_default_config()).validate(CONFIG_SCHEMA)

    @pytest.mark.parametrize("key, value", [
        ("engine.max_workers", 0),
        ("engine.max_workers", "four"),
        ("engine.max_workers", True),
        ("engine.timeout", -1),
        ("engine.parallel", "yes"),
        ("suggestions.max_suggestions", -2),
        ("logging.level", "LOUD"),
        ("logging.format", "xml"),
    ])
    def test_rejects(self, key, value):
        config = ConfigManager(get_default_config())
        config.set(key, value)

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate(CONFIG_SCHEMA)
        assert exc_info.value.config_key == key

    def test_float_timeout_accepted(self):
        config = ConfigManager(get_default_config())
        config.set("engine.timeout", 2.5)
        config.validate(CONFIG_SCHEMA)

    def test_required_missing(self):
        with pytest.raises(ConfigurationError, match="Required"):
            ConfigManager({}).validate(CONFIG_SCHEMA)


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config() == get_default_config()

    def test_default_location(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "sonicmind.yaml").write_text("engine:\n  seed: 12\n")

        config = load_config()

        assert config["engine"]["seed"] == 12
        assert config["engine"]["max_workers"] == 4

    def test_explicit_path(self, write_config):
        path = write_config({"suggestions": {"max_suggestions": 2}}, name="custom.yaml")
        assert load_config(str(path))["suggestions"]["max_suggestions"] == 2

    def test_invalid_file_rejected(self, write_config):
        path = write_config({"engine": {"max_workers": -1}})
        with pytest.raises(ConfigurationError):
            load_config(str(path))
