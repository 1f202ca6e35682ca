"""Tests for configuration management."""

import pytest
from pydantic import ValidationError

from cf_terraforming.config import Settings, get_config, reset_config, set_config
from cf_terraforming.errors import ConfigurationError


class TestSettings:
    def test_defaults(self):
        cfg = Settings()
        assert cfg.api_token is None
        assert cfg.api_hostname == "api.cloudflare.com"
        assert cfg.api_base_url == "https://api.cloudflare.com/client/v4"
        assert cfg.max_workers == 4
        assert cfg.log_level == "WARNING"
        assert cfg.log_format == "console"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("CLOUDFLARE_API_TOKEN", "env-token")
        monkeypatch.setenv("CLOUDFLARE_ZONE_ID", "zone-from-env")
        monkeypatch.setenv("CLOUDFLARE_MAX_WORKERS", "8")
        cfg = Settings()
        assert cfg.api_token == "env-token"
        assert cfg.zone_id == "zone-from-env"
        assert cfg.max_workers == 8

    def test_log_level_is_normalised(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            Settings(log_level="LOUD")

    def test_invalid_log_format(self):
        with pytest.raises(ValueError, match="Invalid log format"):
            Settings(log_format="xml")

    def test_invalid_max_workers(self):
        with pytest.raises(ValueError, match="max_workers must be at least 1"):
            Settings(max_workers=0)

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(timeout_seconds=0)

    def test_is_frozen(self):
        cfg = Settings()
        with pytest.raises(Exception):
            cfg.api_token = "changed"

    def test_custom_hostname(self):
        cfg = Settings(api_hostname="api.staging.cloudflare.com")
        assert cfg.api_base_url == "https://api.staging.cloudflare.com/client/v4"


class TestCredentials:
    def test_token(self):
        assert Settings(api_token="t").has_credentials

    def test_email_and_key(self):
        assert Settings(email="a@example.com", api_key="k").has_credentials

    def test_key_without_email(self):
        cfg = Settings(api_key="k")
        assert not cfg.has_credentials
        with pytest.raises(ConfigurationError) as exc_info:
            cfg.require_credentials()
        assert exc_info.value.field == "api_key"

    def test_nothing_configured(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings().require_credentials()
        assert exc_info.value.field == "api_token"
        assert "suggestion" in exc_info.value.details

    def test_require_credentials_passes(self):
        Settings(api_token="t").require_credentials()


class TestMerged:
    def test_overrides_apply(self):
        cfg = Settings(api_token="env").merged(api_token="flag", zone_id="z")
        assert cfg.api_token == "flag"
        assert cfg.zone_id == "z"

    def test_none_overrides_are_ignored(self):
        base = Settings(api_token="env")
        assert base.merged(api_token=None) is base

    def test_overrides_are_validated(self):
        with pytest.raises(ValidationError):
            Settings().merged(log_level="LOUD")

    def test_base_is_untouched(self):
        base = Settings(api_token="env")
        base.merged(api_token="flag")
        assert base.api_token == "env"


class TestValidateSettings:
    def test_no_credentials(self):
        assert "No Cloudflare credentials configured" in Settings().validate_settings()

    def test_token_and_key(self):
        errors = Settings(api_token="t", email="e", api_key="k").validate_settings()
        assert any("token wins" in e for e in errors)

    def test_clean(self):
        assert Settings(api_token="t").validate_settings() == []


class TestSerialisation:
    def test_to_dict_masks_secrets(self):
        data = Settings(api_token="secret", api_key="key", email="a@example.com").to_dict()
        assert data["api_token"] == "****"
        assert data["api_key"] == "****"
        assert data["email"] == "a@example.com"

    def test_str_has_no_secrets(self):
        assert "secret" not in str(Settings(api_token="secret"))


class TestGlobalConfig:
    def test_get_config_returns_same_instance(self):
        assert get_config() is get_config()

    def test_set_config(self):
        cfg = Settings(api_token="t")
        set_config(cfg)
        assert get_config() is cfg

    def test_reset_config(self):
        set_config(Settings(api_token="t"))
        reset_config()
        assert get_config().api_token is None
