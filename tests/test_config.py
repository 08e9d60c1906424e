"""설정 테스트"""

from crypto_weather.config import Settings


class TestSettings:
    """Settings 테스트"""

    def test_defaults(self):
        settings = Settings()

        assert settings.coingecko_api_key is None
        assert settings.cache_ttl_seconds == 900
        assert settings.history_days == 30
        assert settings.cors_origins == ["http://localhost:3000"]
        assert settings.forecast_seed is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("COINGECKO_API_KEY", "cg-test")
        monkeypatch.setenv("CACHE_TTL_SECONDS", "120")
        monkeypatch.setenv("REQUEST_TIMEOUT", "5")
        monkeypatch.setenv("HISTORY_DAYS", "60")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
        monkeypatch.setenv("FORECAST_SEED", "42")

        settings = Settings.from_env()

        assert settings.coingecko_api_key == "cg-test"
        assert settings.cache_ttl_seconds == 120.0
        assert settings.request_timeout == 5.0
        assert settings.history_days == 60
        assert settings.log_level == "DEBUG"
        assert settings.cors_origins == ["http://a.test", "http://b.test"]
        assert settings.forecast_seed == 42

    def test_blank_values(self, monkeypatch):
        monkeypatch.setenv("COINGECKO_API_KEY", "")
        monkeypatch.setenv("FORECAST_SEED", " ")

        settings = Settings.from_env()

        assert settings.coingecko_api_key is None
        assert settings.forecast_seed is None
