"""Tests for application configuration."""

import pytest

from limer_properties.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(sanity_project_id="abc123")


class TestDefaults:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.sanity_dataset == "production"
        assert s.sanity_use_cdn is True
        assert s.email_endpoint_url == ""
        assert not s.sanity_configured
        assert s.resend_api_key.get_secret_value() == ""
        assert s.log_level == "info"

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LIMER_SANITY_PROJECT_ID", "fromenv")
        monkeypatch.setenv("LIMER_RESEND_API_KEY", "re_env")
        monkeypatch.setenv("LIMER_LOG_LEVEL", "debug")
        s = Settings()
        assert s.sanity_project_id == "fromenv"
        assert s.sanity_configured
        assert s.resend_api_key.get_secret_value() == "re_env"
        assert s.log_level == "debug"

    def test_secrets_are_masked(self) -> None:
        s = Settings(resend_api_key="re_secret", sanity_token="sk_secret")
        assert "re_secret" not in repr(s)
        assert "sk_secret" not in repr(s)


class TestSanityQueryUrl:
    def test_cdn(self, settings: Settings) -> None:
        assert settings.sanity_query_url == (
            "https://abc123.apicdn.sanity.io/v2024-01-01/data/query/production"
        )

    def test_live_api_and_custom_dataset(self) -> None:
        s = Settings(
            sanity_project_id="abc123",
            sanity_dataset="staging",
            sanity_api_version="2025-02-19",
            sanity_use_cdn=False,
        )
        assert s.sanity_query_url == "https://abc123.api.sanity.io/v2025-02-19/data/query/staging"


class TestPropertyDetailsUrl:
    def test_none_without_site_url(self, settings: Settings) -> None:
        assert settings.property_details_url("duplex") is None

    def test_trailing_slash_trimmed(self) -> None:
        s = Settings(site_base_url="https://limer.example/")
        assert s.property_details_url("duplex") == "https://limer.example/property/duplex"


class TestValidation:
    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            Settings(http_timeout_seconds=0)
