"""FastAPI 엔드포인트 테스트"""

import random
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from crypto_weather import CryptoWeatherService, ForecastContext
from crypto_weather.api import create_app
from crypto_weather.cache import TTLCache
from crypto_weather.client import CoinGeckoClient
from crypto_weather.config import Settings
from crypto_weather.errors import MarketDataError
from crypto_weather.market import MarketDataProvider
from crypto_weather.models import MarketSignals, PricePoint


@pytest.fixture
def coingecko(btc_quote):
    client = MagicMock(spec=CoinGeckoClient)
    client.get_quote.return_value = btc_quote
    client.get_coin_markets.return_value = [btc_quote]
    client.get_market_chart.return_value = [
        PricePoint(datetime(2024, 1, 1) + timedelta(days=i), 45000.0 + i * 10) for i in range(31)
    ]
    client.get_market_signals.return_value = MarketSignals(coin_id="bitcoin")
    return client


@pytest.fixture
def api(coingecko):
    provider = MarketDataProvider(coingecko, TTLCache())
    service = CryptoWeatherService(ForecastContext(provider=provider, rng=random.Random(1)))
    return TestClient(create_app(service=service, settings=Settings()))


class TestSystem:
    def test_health(self, api):
        response = api.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["service"] == "crypto-weather-backend"


class TestCryptoEndpoints:
    """/crypto 엔드포인트 테스트"""

    def test_get_crypto(self, api):
        response = api.get("/crypto", params={"coin": "bitcoin"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["price"] == 45000.0
        assert len(body["data"]["forecast"]) == 5

    def test_unknown_crypto(self, api, coingecko):
        coingecko.get_quote.return_value = None

        response = api.get("/crypto", params={"coin": "not-a-coin"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Cryptocurrency not found"

    def test_popular(self, api):
        response = api.get("/crypto/popular")

        assert response.status_code == 200
        assert response.json()["data"][0]["symbol"] == "btc"

    def test_history(self, api):
        response = api.get("/crypto/history", params={"id": "bitcoin", "days": 30})

        assert response.status_code == 200
        assert len(response.json()["data"]) == 31

    def test_history_requires_id(self, api):
        response = api.get("/crypto/history")

        assert response.status_code == 400
        assert response.json()["detail"] == "Crypto ID is required"

    def test_history_days_validated(self, api):
        assert api.get("/crypto/history", params={"id": "bitcoin", "days": 0}).status_code == 422

    def test_history_upstream_error(self, api, coingecko):
        coingecko.get_market_chart.side_effect = MarketDataError("boom")

        response = api.get("/crypto/history", params={"id": "bitcoin"})
        assert response.status_code == 502


class TestForecastEndpoint:
    """/forecast 엔드포인트 테스트"""

    def test_forecast(self, api):
        response = api.get("/forecast", params={"coin": "bitcoin", "confidence": "conservative"})

        assert response.status_code == 200
        body = response.json()
        assert body["fallback"] is False
        assert "fallback" not in body["data"]
        assert len(body["data"]["weekly"]["days"]) == 5
        assert body["data"]["disclaimer"].startswith("This forecast is for entertainment")

    def test_live_forecast(self, api):
        body = api.get("/forecast", params={"live": "true"}).json()
        assert body["data"]["source"] == "live"

    def test_mock(self, api):
        body = api.get("/forecast", params={"mock": "true"}).json()

        assert body["fallback"] is False
        assert body["data"]["weekly"]["period"] == "7 days"

    def test_invalid_confidence_falls_back(self, api):
        body = api.get("/forecast", params={"confidence": "bogus"}).json()

        assert body["success"] is True
        assert body["fallback"] is True
        assert body["data"]["alerts"][-1]["type"] == "Forecast Unavailable"


class TestAppFactory:
    """create_app 테스트"""

    def test_service_built_once(self):
        app = create_app(settings=Settings(history_days=14))
        service = app.state.service

        assert isinstance(service, CryptoWeatherService)
        assert service.context.history_window == 30

        with TestClient(app) as client:
            client.get("/health")
        assert app.state.service is service
