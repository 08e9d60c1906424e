"""
5일 가격 경로 예보 생성기

지표와 센티먼트로 추세 신호(base trend)를 만들고,
감쇠 가중치 + 제한된 난수 노이즈로 일간 가격을 누적 투영한다.
난수는 주입된 random.Random만 사용한다 (시드 고정 시 결정적).
"""

import math
import random
from collections.abc import Sequence
from datetime import date, timedelta

import numpy as np

from crypto_weather.indicators import calculate_indicators
from crypto_weather.models import (
    ConfidenceLevel,
    ForecastDay,
    ForecastResult,
    IndicatorSet,
    MarketSignals,
    PricePoint,
    PriceRange,
    SentimentSet,
    VolatilityTier,
    WeatherIcon,
)
from crypto_weather.sentiment import RSI_OVERBOUGHT, RSI_OVERSOLD, estimate_sentiment

DISCLAIMER = (
    "This forecast is for entertainment purposes only and should not be used "
    "for investment decisions. Cryptocurrency markets are highly volatile and unpredictable."
)

FORECAST_DAYS = 5
DECAY = 0.9
NOISE_AMPLITUDE = 0.01  # ±1%
MATERIAL_CHANGE_PCT = 5.0
PRICE_FLOOR_RATIO = 0.1
MAX_CONFIDENCE = 80
MIN_CONFIDENCE = 20
CONFIDENCE_STEP = 10
LOW_VOLATILITY = 20.0
HIGH_VOLATILITY = 50.0

_MAX_MULTIPLIER = max(level.multiplier for level in ConfidenceLevel)

# (하한 %, 아이콘) - 위에서부터 처음 초과하는 구간
_WEATHER_TIERS = [
    (5.0, WeatherIcon.ROCKET),
    (2.0, WeatherIcon.SUNNY),
    (0.0, WeatherIcon.PARTLY_CLOUDY),
    (-2.0, WeatherIcon.CLOUDY),
    (-5.0, WeatherIcon.RAINY),
]


def weather_for_change(change_pct: float) -> WeatherIcon:
    """변동률(%) → 날씨 아이콘"""
    for threshold, icon in _WEATHER_TIERS:
        if change_pct > threshold:
            return icon
    return WeatherIcon.STORMY


def volatility_tier(annualized_volatility: float) -> VolatilityTier:
    """연환산 변동성(%) → Low / Medium / High"""
    if annualized_volatility < LOW_VOLATILITY:
        return VolatilityTier.LOW
    if annualized_volatility > HIGH_VOLATILITY:
        return VolatilityTier.HIGH
    return VolatilityTier.MEDIUM


def base_trend(
    current_price: float,
    change_24h: float,
    indicators: IndicatorSet,
    sentiment: SentimentSet,
) -> float:
    """추세 신호 (양수 = 상승 편향)"""
    trend = 0.0

    # 이동평균 정렬
    if current_price > indicators.ma7:
        trend += 0.5
    if indicators.ma7 > indicators.ma14:
        trend += 0.5
    if indicators.ma14 > indicators.ma30:
        trend += 0.3

    # 센티먼트 편차
    trend += (sentiment.fear_greed_index - 50) / 100

    # RSI 극단값, MACD
    if indicators.rsi > RSI_OVERBOUGHT:
        trend -= 0.2
    if indicators.rsi < RSI_OVERSOLD:
        trend += 0.2
    if indicators.macd.macd > indicators.macd.signal:
        trend += 0.1

    # 24h 변동이 유의미할 때만 추세 강도 반영
    if abs(change_24h) > MATERIAL_CHANGE_PCT:
        trend += math.copysign(0.3, change_24h)

    return trend


def daily_volatility_fraction(annualized_volatility: float) -> float:
    """연환산 변동성 → 일간 비율 (모든 예보일에 동일하게 적용)"""
    return annualized_volatility / 100 / math.sqrt(365)


def project_forecast(
    current_price: float,
    change_24h: float,
    indicators: IndicatorSet,
    sentiment: SentimentSet,
    confidence_level: ConfidenceLevel | str = ConfidenceLevel.MODERATE,
    rng: random.Random | None = None,
    start: date | None = None,
) -> list[ForecastDay]:
    """
    5일 예보 투영

    노이즈 폭은 confidence multiplier에 비례 (aggressive = ±1%).
    같은 시드라면 conservative의 1일차 변동폭이 항상 aggressive보다 작다.
    """
    level = ConfidenceLevel.parse(confidence_level)
    rng = rng or random.Random()
    start = start or date.today()

    trend = base_trend(current_price, change_24h, indicators, sentiment) * level.multiplier
    noise_scale = NOISE_AMPLITUDE * level.multiplier / _MAX_MULTIPLIER
    range_fraction = daily_volatility_fraction(indicators.volatility)
    tier = volatility_tier(indicators.volatility)
    floor = current_price * PRICE_FLOOR_RATIO

    forecast = []
    previous_price = current_price

    for day in range(1, FORECAST_DAYS + 1):
        decay = DECAY ** (day - 1)
        noise = rng.uniform(-1.0, 1.0) * noise_scale
        daily_change = (trend * 0.01 + noise) * decay

        price = max(previous_price * (1 + daily_change), floor)
        price_range = PriceRange(
            low=max(price * (1 - range_fraction), floor),
            high=price * (1 + range_fraction),
        )

        change_pct = (price - previous_price) / previous_price * 100

        forecast.append(
            ForecastDay(
                date=start + timedelta(days=day),
                price=price,
                price_range=price_range,
                confidence=max(MIN_CONFIDENCE, MAX_CONFIDENCE - (day - 1) * CONFIDENCE_STEP),
                weather_icon=weather_for_change(change_pct),
                volatility_tier=tier,
            )
        )
        previous_price = price

    return forecast


def build_summary(
    current_price: float,
    forecast: list[ForecastDay],
    indicators: IndicatorSet,
    sentiment: SentimentSet,
) -> str:
    """한 줄 요약 (예: "Neutral bullish outlook with moderate volatility expected.")"""
    direction = "bullish" if forecast[0].price > current_price else "bearish"

    if sentiment.fear_greed_index > 70:
        mood = "optimistic"
    elif sentiment.fear_greed_index < 30:
        mood = "cautious"
    else:
        mood = "neutral"

    if indicators.volatility > HIGH_VOLATILITY:
        vol = "high"
    elif indicators.volatility > LOW_VOLATILITY:
        vol = "moderate"
    else:
        vol = "low"

    return f"{mood.capitalize()} {direction} outlook with {vol} volatility expected."


def compute_forecast(
    prices: Sequence[float] | Sequence[PricePoint] | np.ndarray,
    current_price: float,
    change_24h: float,
    signals: MarketSignals | None = None,
    confidence_level: ConfidenceLevel | str = ConfidenceLevel.MODERATE,
    rng: random.Random | None = None,
    coin: str = "",
    symbol: str = "",
    start: date | None = None,
) -> ForecastResult:
    """
    가격 히스토리 → 지표 → 센티먼트 → 5일 예보

    Raises:
        InsufficientDataError: 양수 가격 30개 미만
        InvalidInputError: 잘못된 가격 또는 confidence 토큰
    """
    level = ConfidenceLevel.parse(confidence_level)
    technicals = calculate_indicators(prices, current_price)
    sentiment = estimate_sentiment(technicals, current_price, change_24h, signals)
    days = project_forecast(
        current_price, change_24h, technicals, sentiment, level, rng=rng, start=start
    )

    return ForecastResult(
        coin=coin,
        symbol=symbol.upper(),
        current_price=current_price,
        forecast=days,
        technicals=technicals,
        sentiment=sentiment,
        summary=build_summary(current_price, days, technicals, sentiment),
        disclaimer=DISCLAIMER,
    )
