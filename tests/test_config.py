"""Tests for config models and YAML loader."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from bragi_status.config.loader import (
    _apply_env_overrides,
    _expand_tree,
    _expand_vars,
    find_config_file,
    load_config,
    load_env_config,
)
from bragi_status.config.models import BragiEndpoint, ProbeConfig, ServiceConfig, StatusConfig
from bragi_status.probe.errors import ConfigurationError

# ─── Model tests ───


class TestBragiEndpoint:
    def test_defaults(self):
        endpoint = BragiEndpoint()
        assert endpoint.url == "http://localhost:4000"

    def test_custom(self):
        assert BragiEndpoint(host="bragi-ws", port=80).url == "http://bragi-ws:80"

    def test_empty_host(self):
        with pytest.raises(ConfigurationError):
            BragiEndpoint(host="").url

    def test_port_range(self):
        with pytest.raises(ValidationError):
            BragiEndpoint(port=70000)


class TestProbeConfig:
    def test_defaults(self):
        cfg = ProbeConfig()
        assert cfg.timeout == 10.0
        assert cfg.on_elasticsearch_failure == "degrade"
        assert cfg.on_malformed_index == "skip"
        assert cfg.default_index_prefix == "munin"

    def test_unknown_policy(self):
        with pytest.raises(ValidationError):
            ProbeConfig(on_elasticsearch_failure="ignore")

    def test_timeout_positive(self):
        with pytest.raises(ValidationError):
            ProbeConfig(timeout=0)


class TestStatusConfig:
    def test_defaults(self):
        cfg = StatusConfig()
        assert cfg.service == ServiceConfig()
        assert cfg.service.port == 8080
        assert cfg.log_level == "INFO"

    def test_from_dict(self, sample_config: StatusConfig):
        assert sample_config.bragi.url == "http://bragi:4000"
        assert sample_config.probe.timeout == 2.0

    def test_frozen(self, sample_config: StatusConfig):
        with pytest.raises(ValidationError):
            sample_config.mode = "production"


# ─── Env interpolation tests ───


class TestExpandVars:
    def test_simple_var(self):
        assert _expand_vars("${BRAGI_HOST}", {"BRAGI_HOST": "bragi-ws"}) == "bragi-ws"

    def test_fallback(self):
        assert _expand_vars("${BRAGI_HOST:-localhost}", {}) == "localhost"

    def test_set_var_beats_fallback(self):
        assert _expand_vars("${BRAGI_HOST:-localhost}", {"BRAGI_HOST": "bragi-ws"}) == "bragi-ws"

    def test_unresolved_kept(self):
        assert _expand_vars("${NOPE_VAR}", {}) == "${NOPE_VAR}"

    def test_embedded(self):
        assert _expand_vars("http://${ES_HOST}:9200", {"ES_HOST": "es"}) == "http://es:9200"

    def test_tree(self):
        data = {"a": ["${ES_PORT}", 1], "b": {"c": "x${ES_PORT}"}}
        assert _expand_tree(data, {"ES_PORT": "9200"}) == {"a": ["9200", 1], "b": {"c": "x9200"}}


class TestEnvOverrides:
    def test_nested(self):
        data = {"bragi": {"host": "localhost", "port": 4000}}
        merged = _apply_env_overrides(data, {"BRAGI_STATUS_BRAGI__HOST": "bragi-ws"})
        assert merged == {"bragi": {"host": "bragi-ws", "port": 4000}}
        assert data["bragi"]["host"] == "localhost"

    def test_top_level_and_new_section(self):
        merged = _apply_env_overrides({}, {"BRAGI_STATUS_LOG_LEVEL": "DEBUG", "BRAGI_STATUS_PROBE__TIMEOUT": "3"})
        assert merged == {"log_level": "DEBUG", "probe": {"timeout": "3"}}

    def test_unrelated_ignored(self):
        assert _apply_env_overrides({"mode": "x"}, {"HOME": "/root", "BRAGI_STATUS_": "y"}) == {"mode": "x"}


# ─── Loader tests ───


class TestLoadConfig:
    def test_load_file(self, config_file: Path):
        cfg = load_config(config_file, environ={})
        assert cfg.bragi.host == "bragi"
        assert cfg.service.host == "127.0.0.1"

    def test_env_override_wins(self, config_file: Path):
        cfg = load_config(config_file, environ={"BRAGI_STATUS_BRAGI__PORT": "4400"})
        assert cfg.bragi.port == 4400

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_invalid(self, tmp_path: Path):
        path = tmp_path / ".bragi-status.yaml"
        path.write_text("bragi:\n  port: not-a-port\n")
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path, environ={})

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / ".bragi-status.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            load_config(path, environ={})

    def test_interpolation_uses_given_environment(self, tmp_path: Path):
        path = tmp_path / ".bragi-status.yaml"
        path.write_text("bragi:\n  host: ${BRAGI_HOST:-localhost}\n")
        assert load_config(path, environ={}).bragi.host == "localhost"
        assert load_config(path, environ={"BRAGI_HOST": "bragi-ws"}).bragi.host == "bragi-ws"

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / ".bragi-status.yaml"
        path.write_text("")
        assert load_config(path, environ={}) == StatusConfig()


class TestFindConfigFile:
    def test_walks_up(self, config_file: Path):
        nested = config_file.parent / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == config_file.resolve()

    def test_not_found(self, tmp_path: Path):
        with patch("bragi_status.config.loader.CONFIG_FILENAME", ".does-not-exist.yaml"):
            assert find_config_file(tmp_path) is None

    def test_stops_at_filesystem_root(self, tmp_path: Path):
        with patch("bragi_status.config.loader.CONFIG_FILENAME", ".does-not-exist.yaml"):
            assert find_config_file(Path(tmp_path.anchor)) is None


class TestLoadEnvConfig:
    def test_defaults_without_variables(self):
        assert load_env_config({"HOME": "/root"}) == StatusConfig()

    def test_overrides_applied(self):
        cfg = load_env_config({"BRAGI_STATUS_BRAGI__HOST": "bragi-ws", "BRAGI_STATUS_PROBE__TIMEOUT": "3"})
        assert cfg.bragi.url == "http://bragi-ws:4000"
        assert cfg.probe.timeout == 3.0

    def test_invalid_value(self):
        with pytest.raises(ValueError, match="Invalid configuration in environment"):
            load_env_config({"BRAGI_STATUS_BRAGI__PORT": "not-a-port"})
