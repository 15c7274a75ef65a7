"""Tests for warbler.config — AppConfig and environment-sectioned config files."""

import json
import logging
from pathlib import Path

import pytest

from warbler.config import AppConfig, load_config
from warbler.errors import ConfigurationError


class TestAppConfig:
    def test_defaults(self) -> None:
        cfg = AppConfig()

        assert cfg.debug is False
        assert cfg.plugin_dir == "plugins"
        assert cfg.plugin_extension == ".py"
        assert cfg.default_action == "_default"
        assert cfg.routes_file is None
        assert cfg.template_dir == "templates"
        assert cfg.autoescape is True
        assert cfg.forbidden_status == 503

    def test_override(self) -> None:
        cfg = AppConfig(debug=True, plugin_dir="controllers", forbidden_status=403)

        assert cfg.debug is True
        assert cfg.plugin_dir == "controllers"
        assert cfg.forbidden_status == 403

    def test_frozen(self) -> None:
        cfg = AppConfig()

        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]


def _write_json(tmp_path: Path, data: object) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data))
    return path


class TestLoadConfig:
    def test_env_overrides_all(self, tmp_path: Path) -> None:
        path = _write_json(
            tmp_path,
            {
                "all": {"plugin_dir": "controllers", "debug": False},
                "dev": {"debug": True},
                "prod": {"template_dir": "/srv/templates"},
            },
        )
        cfg = load_config(path, "dev")

        assert cfg.debug is True
        assert cfg.plugin_dir == "controllers"
        assert cfg.template_dir == "templates"

    def test_other_env(self, tmp_path: Path) -> None:
        path = _write_json(tmp_path, {"all": {}, "prod": {"template_dir": "/srv/templates"}})
        assert load_config(path, "prod").template_dir == "/srv/templates"

    def test_only_all_section(self, tmp_path: Path) -> None:
        path = _write_json(tmp_path, {"all": {"forbidden_status": 403}})
        assert load_config(path, "staging").forbidden_status == 403

    def test_only_env_section(self, tmp_path: Path) -> None:
        path = _write_json(tmp_path, {"dev": {"debug": True}})
        assert load_config(path).debug is True

    def test_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[all]\nrouter_dir = "x"\nplugin_dir = "ctl"\n\n[dev]\ndebug = true\n')
        cfg = load_config(path)

        assert cfg.plugin_dir == "ctl"
        assert cfg.debug is True

    def test_unknown_keys_warned(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = _write_json(tmp_path, {"all": {"bogus": 1}})
        with caplog.at_level(logging.WARNING, logger="warbler.config"):
            cfg = load_config(path)

        assert cfg == AppConfig()
        assert any("bogus" in r.getMessage() for r in caplog.records)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="does not exist"):
            load_config(tmp_path / "missing.json")

    def test_missing_sections(self, tmp_path: Path) -> None:
        path = _write_json(tmp_path, {"prod": {"debug": False}})
        with pytest.raises(ConfigurationError, match="section named 'all'"):
            load_config(path, "dev")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = _write_json(tmp_path, {})
        with pytest.raises(ConfigurationError, match="empty or not a mapping"):
            load_config(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = _write_json(tmp_path, [1, 2])
        with pytest.raises(ConfigurationError, match="empty or not a mapping"):
            load_config(path)

    def test_section_not_mapping(self, tmp_path: Path) -> None:
        path = _write_json(tmp_path, {"all": ["debug"]})
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            load_config(path)

    def test_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{oops")
        with pytest.raises(ConfigurationError, match="Could not parse"):
            load_config(path)

    def test_unsupported_type(self, tmp_path: Path) -> None:
        path = tmp_path / "config.ini"
        path.write_text("[all]\n")
        with pytest.raises(ConfigurationError, match="Unsupported config file type"):
            load_config(path)
