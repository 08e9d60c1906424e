"""화면용 날씨 표현 테스트"""

import random
from datetime import date, timedelta

import pytest

from crypto_weather.forecast import DISCLAIMER
from crypto_weather.models import (
    ForecastDay,
    ForecastResult,
    PriceRange,
    SentimentSet,
    VolatilityTier,
    WeatherIcon,
)
from crypto_weather.presentation import (
    QUICK_DAY_LABELS,
    build_alerts,
    forecast_payload,
    mock_forecast,
    quick_weather,
    to_weekly_view,
)


@pytest.fixture
def make_result(make_indicators):
    def _make(prices, fear_greed=50.0, tier=VolatilityTier.MEDIUM):
        start = date(2024, 1, 1)  # 월요일
        days = [
            ForecastDay(
                date=start + timedelta(days=i),
                price=price,
                price_range=PriceRange(price * 0.97, price * 1.03),
                confidence=max(20, 80 - i * 10),
                weather_icon=WeatherIcon.SUNNY,
                volatility_tier=tier,
            )
            for i, price in enumerate(prices)
        ]
        return ForecastResult(
            coin="Bitcoin",
            symbol="BTC",
            current_price=100.0,
            forecast=days,
            technicals=make_indicators(),
            sentiment=SentimentSet(50.0, 50.0, 50.0, 50.0, fear_greed),
            summary="Neutral bullish outlook with moderate volatility expected.",
            disclaimer=DISCLAIMER,
        )

    return _make


class TestWeeklyView:
    """요일 단위 변환 테스트"""

    def test_weekdays(self, make_result):
        view = to_weekly_view(make_result([101.0, 102.0, 103.0, 104.0, 105.0]))

        assert view["period"] == "5 days"
        assert [d["day"] for d in view["days"]] == ["Mon", "Tue", "Wed", "Thu", "Fri"]
        assert view["days"][0]["date"] == "2024-01-01"
        assert view["days"][0]["priceRange"] == {"low": 97.97, "high": 104.03}
        assert view["days"][4]["confidence"] == 40

    def test_payload(self, make_result):
        payload = forecast_payload(make_result([101.0, 102.0, 103.0, 104.0, 105.0]))

        assert payload["symbol"] == "BTC"
        assert payload["currentPrice"] == 100.0
        assert payload["disclaimer"] == DISCLAIMER
        assert "fearGreedIndex" in payload["sentiment"]
        assert "fallback" not in payload


class TestAlerts:
    """알림 테스트"""

    def test_crystal_ball_only(self, make_result):
        alerts = build_alerts(make_result([100.0, 101.0, 102.0, 101.0, 100.0]))

        assert [a["type"] for a in alerts] == ["Crystal Ball Analysis"]
        assert "Fear & Greed: 50" in alerts[0]["message"]

    def test_storm_and_bullish_and_greed(self, make_result):
        result = make_result([100.0, 104.0, 108.0, 112.0, 116.0], fear_greed=80.0, tier=VolatilityTier.HIGH)
        types = [a["type"] for a in build_alerts(result)]

        assert types == ["Crystal Ball Analysis", "Storm Warning", "Bullish Forecast", "Greed Zone"]

    def test_bearish_and_fear(self, make_result):
        result = make_result([100.0, 96.0, 92.0, 88.0, 85.0], fear_greed=20.0)
        alerts = build_alerts(result)

        assert [a["type"] for a in alerts] == ["Crystal Ball Analysis", "Bearish Warning", "Fear Zone"]
        assert alerts[1]["severity"] == "high"


class TestMockForecast:
    """mock 예보 테스트"""

    def test_deterministic(self):
        assert mock_forecast() == mock_forecast()

    def test_shape(self):
        data = mock_forecast()

        assert data["weekly"]["period"] == "7 days"
        assert len(data["weekly"]["days"]) == 7
        assert data["fallback"] is False
        assert [a["type"] for a in data["alerts"]] == ["Crystal Ball Active"]

    def test_with_reason(self):
        data = mock_forecast("Insufficient price data")

        assert data["fallback"] is True
        assert data["alerts"][-1]["type"] == "Forecast Unavailable"
        assert "Insufficient price data" in data["alerts"][-1]["message"]


class TestQuickWeather:
    """시세 카드 날씨 테스트"""

    def test_quick_weather(self):
        icon, days = quick_weather(100.0, 3.0, random.Random(11))

        assert icon is WeatherIcon.SUNNY
        assert [d["day"] for d in days] == QUICK_DAY_LABELS
        previous = 100.0
        for day in days:
            assert abs(day["price"] - previous) <= previous * 0.05 + 0.01
            previous = day["price"]
