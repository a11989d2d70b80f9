"""Tests for client settings."""

import pytest

from asana_client_core.auth import CredentialNotFoundError, CredentialResolver, OAuth2TokenProvider, StaticTokenProvider
from asana_client_core.config import DEFAULT_BASE_URL, ClientSettings


@pytest.fixture
def resolver():
    return CredentialResolver(load_dotenv=False)


class TestClientSettingsFromEnv:
    @pytest.mark.unit
    def test_defaults(self, resolver):
        settings = ClientSettings.from_env(resolver)

        assert settings.access_token is None
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.timeout == 30.0
        assert settings.retry_backoff == 1.0

    @pytest.mark.unit
    def test_reads_environment(self, resolver, monkeypatch):
        monkeypatch.setenv("ASANA_ACCESS_TOKEN", "env-token")
        monkeypatch.setenv("ASANA_BASE_URL", "https://asana.example.com/api/1.0")
        monkeypatch.setenv("ASANA_TIMEOUT", "10")
        monkeypatch.setenv("ASANA_RETRY_BACKOFF", "0.5")

        settings = ClientSettings.from_env(resolver)

        assert settings.access_token == "env-token"
        assert settings.base_url == "https://asana.example.com/api/1.0"
        assert settings.timeout == 10.0
        assert settings.retry_backoff == 0.5

    @pytest.mark.unit
    def test_arguments_win(self, resolver, monkeypatch):
        monkeypatch.setenv("ASANA_ACCESS_TOKEN", "env-token")
        monkeypatch.setenv("ASANA_TIMEOUT", "10")

        settings = ClientSettings.from_env(resolver, access_token="explicit", timeout=5)

        assert settings.access_token == "explicit"
        assert settings.timeout == 5.0

    @pytest.mark.unit
    def test_reads_dotenv_file(self, tmp_path):
        dotenv_file = tmp_path / ".env"
        dotenv_file.write_text("ASANA_ACCESS_TOKEN=dotenv-token\n")

        settings = ClientSettings.from_env(CredentialResolver(dotenv_path=str(dotenv_file)))

        assert settings.access_token == "dotenv-token"


class TestTokenProvider:
    @pytest.mark.unit
    def test_missing_token(self):
        with pytest.raises(CredentialNotFoundError) as exc_info:
            ClientSettings().token_provider()

        assert exc_info.value.env_var_name == "ASANA_ACCESS_TOKEN"

    @pytest.mark.unit
    def test_static_provider(self):
        provider = ClientSettings(access_token="pat", refresh_token="refresh").token_provider()

        assert isinstance(provider, StaticTokenProvider)

    @pytest.mark.unit
    def test_oauth_provider(self):
        provider = ClientSettings(
            access_token="access", refresh_token="refresh", client_id="id", client_secret="secret"
        ).token_provider()

        assert isinstance(provider, OAuth2TokenProvider)
        assert provider.can_refresh
