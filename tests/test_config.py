"""
Tests for environment-driven settings.
"""

from youthmind.config import Settings

ENV_VARS = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "API_KEY",
    "DATABASE_URL",
    "DATABASE_NAME",
    "YOUTHMIND_GEMINI_BASE_URL",
    "YOUTHMIND_TEXT_MODEL",
    "YOUTHMIND_TTS_VOICE",
    "PORT",
)


class TestSettings:
    def setup_method(self):
        """Point the .env lookup at a file that does not exist."""
        self.no_env_file = "/nonexistent/.env"

    def test_defaults(self, monkeypatch):
        for var in ENV_VARS:
            monkeypatch.delenv(var, raising=False)

        settings = Settings(_env_file=self.no_env_file)

        assert settings.api_key == ""
        assert settings.database_url is None
        assert settings.gemini_base_url is None
        assert settings.text_model == "gemini-2.5-flash"
        assert settings.tts_voice == "Algenib"
        assert settings.port == 8000

    def test_reads_environment(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
        monkeypatch.setenv("DATABASE_URL", "mongodb://localhost:27017")
        monkeypatch.setenv("DATABASE_NAME", "wellness")
        monkeypatch.setenv("YOUTHMIND_TEXT_MODEL", "gemini-2.5-pro")
        monkeypatch.setenv("YOUTHMIND_TTS_VOICE", "Kore")
        monkeypatch.setenv("PORT", "9001")

        settings = Settings(_env_file=self.no_env_file)

        assert settings.api_key == "g-key"
        assert settings.database_url == "mongodb://localhost:27017"
        assert settings.database_name == "wellness"
        assert settings.text_model == "gemini-2.5-pro"
        assert settings.tts_voice == "Kore"
        assert settings.port == 9001

    def test_gemini_key_wins(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "primary")
        monkeypatch.setenv("GOOGLE_API_KEY", "fallback")

        assert Settings(_env_file=self.no_env_file).api_key == "primary"

    def test_empty_database_url_means_memory(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "")

        assert Settings(_env_file=self.no_env_file).database_url is None

    def test_explicit_values(self):
        settings = Settings(api_key="k", text_model="m", _env_file=self.no_env_file)

        assert settings.api_key == "k"
        assert settings.text_model == "m"
