"""Tests for config.yaml loading, env substitution and context overrides."""

import os
from pathlib import Path

import pytest

from src.farmconnect.runtime.config.config_data import (
    ConfigData,
    DatabaseConfig,
    LLMConfig,
    MarketPricesConfig,
)
from src.farmconnect.runtime.config.config_template import (
    apply_environment_overrides,
    load_config,
    load_templated_yaml,
    substitute_env_vars,
)
from src.farmconnect.runtime.context import get_config, merge_configs, with_context


class TestSubstituteEnvVars:
    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("FARM_TEST_HOST", raising=False)
        assert substitute_env_vars("host: ${FARM_TEST_HOST:-localhost}") == "host: localhost"

    def test_value_wins_over_default(self, monkeypatch):
        monkeypatch.setenv("FARM_TEST_HOST", "example.org")
        assert substitute_env_vars("${FARM_TEST_HOST:-localhost}") == "example.org"

    def test_empty_default(self, monkeypatch):
        monkeypatch.delenv("FARM_TEST_KEY", raising=False)
        assert substitute_env_vars("key: ${FARM_TEST_KEY:-}") == "key: "

    def test_required_variable_missing(self, monkeypatch):
        monkeypatch.delenv("FARM_TEST_REQUIRED", raising=False)
        with pytest.raises(ValueError, match="FARM_TEST_REQUIRED"):
            substitute_env_vars("${FARM_TEST_REQUIRED}")

    def test_required_with_message(self, monkeypatch):
        monkeypatch.delenv("FARM_TEST_REQUIRED", raising=False)
        with pytest.raises(ValueError, match="set me please"):
            substitute_env_vars("${FARM_TEST_REQUIRED:?set me please}")


class TestEnvironmentOverrides:
    def test_prefixed_variables_are_promoted(self, monkeypatch):
        monkeypatch.setenv("TEST_FARM_OVERRIDE", "from-test")
        # Registered so monkeypatch removes the promoted variable afterwards
        monkeypatch.setenv("FARM_OVERRIDE", "unset")

        applied = apply_environment_overrides("test")

        assert "FARM_OVERRIDE" in applied
        assert os.environ["FARM_OVERRIDE"] == "from-test"


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "absent.yaml")
        assert config == ConfigData()

    def test_yaml_sections_are_loaded(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text(
            "config:\n"
            "  llm:\n"
            "    api_key: ${GEMINI_API_KEY:-}\n"
            "    model: gemini-test\n"
            "  market_prices:\n"
            "    provider: rapidapi\n"
            "    snapshot_limit: 10\n"
            "  cart:\n"
            "    ttl_seconds: 60\n"
        )

        config = load_templated_yaml(path)

        assert config.llm.model == "gemini-test"
        # Empty keys count as not configured
        assert config.llm.api_key is None
        assert config.market_prices.provider == "rapidapi"
        assert config.market_prices.snapshot_limit == 10
        assert config.cart.ttl_seconds == 60
        assert config.storage.product_bucket == "product-images"

    def test_invalid_document_is_rejected(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("config:\n  market_prices:\n    provider: carrier-pigeon\n")
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_templated_yaml(path)

    def test_empty_document_is_rejected(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        with pytest.raises(ValueError):
            load_templated_yaml(path)

    def test_repository_config_loads(self):
        config = load_config(Path(__file__).parents[3] / "config.yaml")
        assert config.jwt.audiences == ["farmconnect"]
        assert config.storage.max_image_bytes == 5 * 1024 * 1024

    def test_repository_config_loads_without_redis_url(self, monkeypatch):
        monkeypatch.delenv("REDIS_URL", raising=False)

        config = load_templated_yaml(Path(__file__).parents[3] / "config.yaml")

        assert not config.redis.url
        assert config.redis.connection_string == ""

    def test_null_redis_url_is_accepted(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("config:\n  redis:\n    enabled: false\n    url:\n")

        config = load_templated_yaml(path)

        assert config.redis.url is None
        assert config.redis.connection_string == ""


class TestDatabaseConfig:
    def test_sqlite_detection(self):
        config = DatabaseConfig(url="sqlite:///./farmconnect.db")
        assert config.is_sqlite
        assert config.connection_string == "sqlite:///./farmconnect.db"

    def test_invalid_environment_mode(self):
        config = DatabaseConfig(
            url="postgresql://farm@localhost/farm", environment_mode="staging"
        )
        with pytest.raises(ValueError):
            _ = config.connection_string


class TestContextOverrides:
    def test_with_context_merges_explicit_fields(self):
        before = get_config()
        override = ConfigData(market_prices=MarketPricesConfig(provider="rapidapi"))

        with with_context(override):
            config = get_config()
            assert config.market_prices.provider == "rapidapi"
            # Untouched fields of the same section are inherited
            assert config.market_prices.cache_id == before.market_prices.cache_id
            assert config.jwt == before.jwt

        assert get_config().market_prices.provider == before.market_prices.provider

    def test_with_context_none_is_noop(self):
        before = get_config()
        with with_context(None):
            assert get_config() is before

    def test_with_context_rejects_other_types(self):
        with pytest.raises(ValueError):
            with with_context({"llm": {}}):
                pass

    def test_empty_section_resets_to_defaults(self):
        base = ConfigData(llm=LLMConfig(model="custom", temperature=0.1))
        merged = merge_configs(base, ConfigData(llm=LLMConfig()))
        assert merged.llm == LLMConfig()
