"""Tests for configuration getters"""

import pytest

from sliptactix.utils.config import Config
from sliptactix.utils.security import validate_environment


@pytest.fixture
def yaml_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "llm:\n"
        "  model: grok-3-mini\n"
        "  base_url: https://api.x.ai/v1/chat/completions\n"
        "cache:\n"
        "  ttl_seconds: 120\n"
    )
    return Config(config_path=str(path))


class TestConfig:
    """Test dot-notation lookups and env overrides"""

    def test_dot_notation(self, yaml_config):
        assert yaml_config.get("llm.model") == "grok-3-mini"
        assert yaml_config.get("llm.missing", "fallback") == "fallback"
        assert yaml_config.get("cache.ttl_seconds.nested", 5) == 5

    def test_missing_file_uses_defaults(self, tmp_path):
        cfg = Config(config_path=str(tmp_path / "nope.yaml"))
        assert cfg.get_cache_ttl() == 300
        assert cfg.get_request_timeout() == 15
        assert cfg.get_timezone() == "America/New_York"

    def test_cache_ttl_from_yaml(self, yaml_config):
        assert yaml_config.get_cache_ttl() == 120

    def test_grok_url_strips_completions_suffix(self, yaml_config, monkeypatch):
        monkeypatch.delenv("GROK_API_URL", raising=False)
        assert yaml_config.get_grok_api_url() == "https://api.x.ai/v1"

    def test_grok_key_prefers_grok_api_key(self, yaml_config, monkeypatch):
        monkeypatch.setenv("GROK_API_KEY", "grok-key")
        monkeypatch.setenv("XAI_API_KEY", "xai-key")
        assert yaml_config.get_grok_api_key() == "grok-key"
        assert yaml_config.get_grok_key_source() == "GROK_API_KEY"

    def test_grok_key_falls_back_to_xai(self, yaml_config, monkeypatch):
        monkeypatch.delenv("GROK_API_KEY", raising=False)
        monkeypatch.setenv("XAI_API_KEY", "xai-key")
        assert yaml_config.get_grok_api_key() == "xai-key"
        assert yaml_config.get_grok_key_source() == "XAI_API_KEY"

    def test_model_env_override(self, yaml_config, monkeypatch):
        monkeypatch.setenv("GROK_MODEL", "grok-beta")
        assert yaml_config.get_llm_model() == "grok-beta"


class TestValidateEnvironment:
    def test_reports_missing_keys(self, monkeypatch):
        for name in ("GROK_API_KEY", "XAI_API_KEY", "SPORTS_API_KEY"):
            monkeypatch.delenv(name, raising=False)
        ok, issues = validate_environment()
        assert ok is False
        assert len(issues) == 2

    def test_all_present(self, monkeypatch):
        monkeypatch.setenv("GROK_API_KEY", "g")
        monkeypatch.setenv("SPORTS_API_KEY", "s")
        ok, issues = validate_environment()
        assert ok is True
        assert issues == []
