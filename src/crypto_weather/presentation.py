"""예보 결과 → 화면용 날씨 표현 (요일, 알림, mock 예보)"""

import random

from crypto_weather.forecast import weather_for_change
from crypto_weather.models import ForecastResult, VolatilityTier, WeatherIcon

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
QUICK_DAY_LABELS = ["Today", "Tomorrow", "In 2 Days", "In 3 Days", "In 4 Days"]

TREND_ALERT_PCT = 10.0
GREED_ZONE = 75
FEAR_ZONE = 25


def _alert(type_: str, message: str, severity: str, icon: str) -> dict:
    return {"type": type_, "message": message, "severity": severity, "icon": icon}


def to_weekly_view(result: ForecastResult) -> dict:
    """5일 예보를 요일 단위 표현으로 변환"""
    days = []
    for day in result.forecast:
        days.append({
            "day": WEEKDAYS[day.date.weekday()],
            "date": day.date.isoformat(),
            "weather": day.weather_icon.value,
            "price": round(day.price, 2),
            "volatility": day.volatility_tier.value,
            "confidence": day.confidence,
            "priceRange": {
                "low": round(day.price_range.low, 2),
                "high": round(day.price_range.high, 2),
            },
        })

    return {"period": f"{len(days)} days", "trend": result.summary, "days": days}


def build_alerts(result: ForecastResult) -> list[dict]:
    """변동성/추세/센티먼트 기반 알림 목록"""
    fear_greed = result.sentiment.fear_greed_index
    alerts = [
        _alert(
            "Crystal Ball Analysis",
            f"{result.summary} (Fear & Greed: {round(fear_greed)})",
            "low",
            "🔮",
        )
    ]

    stormy = [
        WEEKDAYS[day.date.weekday()]
        for day in result.forecast
        if day.volatility_tier is VolatilityTier.HIGH
    ]
    if stormy:
        alerts.append(_alert(
            "Storm Warning",
            f"High volatility expected on {', '.join(stormy)}",
            "high",
            "⚠️",
        ))

    first, last = result.forecast[0].price, result.forecast[-1].price
    change = (last - first) / first * 100
    if change > TREND_ALERT_PCT:
        alerts.append(_alert(
            "Bullish Forecast", f"Strong upward trend predicted (+{change:.1f}%)", "low", "🚀"
        ))
    elif change < -TREND_ALERT_PCT:
        alerts.append(_alert(
            "Bearish Warning", f"Downward pressure expected ({change:.1f}%)", "high", "📉"
        ))

    if fear_greed > GREED_ZONE:
        alerts.append(_alert(
            "Greed Zone", "Market sentiment extremely bullish - caution advised", "medium", "🔥"
        ))
    elif fear_greed < FEAR_ZONE:
        alerts.append(_alert(
            "Fear Zone", "Market sentiment very bearish - potential opportunity", "medium", "❄️"
        ))

    return alerts


def forecast_payload(result: ForecastResult) -> dict:
    """API 응답용 예보 데이터"""
    return {
        "weekly": to_weekly_view(result),
        "alerts": build_alerts(result),
        "technicals": result.technicals.to_dict(),
        "sentiment": result.sentiment.to_dict(),
        "coin": result.coin,
        "symbol": result.symbol,
        "currentPrice": result.current_price,
        "disclaimer": result.disclaimer,
    }


# 예보를 만들 수 없을 때 보여주는 고정 데이터
_MOCK_WEEK = [
    ("Mon", WeatherIcon.ROCKET, 43000, 2700, VolatilityTier.LOW),
    ("Tue", WeatherIcon.CLOUDY, 42500, 2650, VolatilityTier.MEDIUM),
    ("Wed", WeatherIcon.STORMY, 41800, 2580, VolatilityTier.HIGH),
    ("Thu", WeatherIcon.RAINY, 40500, 2450, VolatilityTier.HIGH),
    ("Fri", WeatherIcon.PARTLY_CLOUDY, 42000, 2600, VolatilityTier.MEDIUM),
    ("Sat", WeatherIcon.SUNNY, 44000, 2750, VolatilityTier.LOW),
    ("Sun", WeatherIcon.SUNNY, 45500, 2850, VolatilityTier.LOW),
]


def mock_forecast(reason: str | None = None) -> dict:
    """
    결정적 mock 예보

    Args:
        reason: 대체 사유 (있으면 "Forecast Unavailable" 알림 추가)
    """
    alerts = [_alert("Crystal Ball Active", "Advanced forecasting algorithm enabled", "low", "🔮")]
    if reason:
        alerts.append(_alert("Forecast Unavailable", f"Using mock data - {reason}", "medium", "⚠️"))

    return {
        "weekly": {
            "period": "7 days",
            "trend": "Bullish storm system approaching",
            "days": [
                {
                    "day": day,
                    "weather": icon.value,
                    "btc": btc,
                    "eth": eth,
                    "volatility": tier.value,
                }
                for day, icon, btc, eth, tier in _MOCK_WEEK
            ],
        },
        "alerts": alerts,
        "fallback": reason is not None,
    }


def quick_weather(
    price: float,
    change_24h: float,
    rng: random.Random,
) -> tuple[WeatherIcon, list[dict]]:
    """시세 카드용 현재 날씨 + 5단계 ±5% 랜덤 워크"""
    forecast = []
    base_price = price
    for label in QUICK_DAY_LABELS:
        variation = (rng.random() - 0.5) * 0.1
        base_price *= 1 + variation
        forecast.append({
            "day": label,
            "price": round(base_price, 2),
            "weather": weather_for_change(variation * 100).value,
        })
    return weather_for_change(change_24h), forecast
