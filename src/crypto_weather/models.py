"""데이터 클래스 및 열거형"""

from dataclasses import asdict, dataclass
from datetime import date, datetime
from enum import Enum

from crypto_weather.errors import InvalidInputError


class BandPosition(Enum):
    """볼린저 밴드 내 현재가 위치"""
    ABOVE = "above"
    MIDDLE = "middle"
    BELOW = "below"


class VolatilityTier(Enum):
    """연환산 변동성 등급"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class WeatherIcon(Enum):
    """일간 변동률 → 날씨 아이콘 (강세 → 약세 순)"""
    ROCKET = "🚀"
    SUNNY = "☀️"
    PARTLY_CLOUDY = "🌤️"
    CLOUDY = "☁️"
    RAINY = "🌧️"
    STORMY = "⛈️"


class ConfidenceLevel(Enum):
    """예측 강도 선택자"""
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"

    @property
    def multiplier(self) -> float:
        return _CONFIDENCE_MULTIPLIERS[self]

    @classmethod
    def parse(cls, token: "str | ConfidenceLevel") -> "ConfidenceLevel":
        """문자열 토큰을 ConfidenceLevel로 변환"""
        if isinstance(token, cls):
            return token
        try:
            return cls(str(token).strip().lower())
        except ValueError:
            allowed = ", ".join(level.value for level in cls)
            raise InvalidInputError(
                f"Unknown confidence level {token!r} (expected one of: {allowed})"
            ) from None


_CONFIDENCE_MULTIPLIERS = {
    ConfidenceLevel.CONSERVATIVE: 0.5,
    ConfidenceLevel.MODERATE: 1.0,
    ConfidenceLevel.AGGRESSIVE: 1.5,
}


@dataclass(frozen=True)
class PricePoint:
    """과거 가격 샘플"""
    timestamp: datetime
    price: float
    market_cap: float | None = None
    volume: float | None = None


@dataclass(frozen=True)
class CoinQuote:
    """현재 시세 정보 (CoinGecko /coins/markets 형식)"""
    id: str
    symbol: str
    name: str
    current_price: float
    price_change_24h: float = 0.0
    price_change_percentage_24h: float = 0.0
    market_cap: float = 0.0
    market_cap_rank: int | None = None
    total_volume: float = 0.0
    last_updated: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "price": self.current_price,
            "change24h": self.price_change_percentage_24h,
            "market_cap": self.market_cap,
            "market_cap_rank": self.market_cap_rank,
            "volume": self.total_volume,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }


@dataclass(frozen=True)
class MACD:
    macd: float
    signal: float
    histogram: float


@dataclass(frozen=True)
class BollingerBands:
    upper: float
    middle: float
    lower: float
    position: BandPosition


@dataclass(frozen=True)
class IndicatorSet:
    """기술적 지표 묶음"""
    ma7: float
    ma14: float
    ma30: float
    rsi: float
    macd: MACD
    bollinger: BollingerBands
    support: float
    resistance: float
    volatility: float  # 연환산 %

    def to_dict(self) -> dict:
        return {
            "ma7": self.ma7,
            "ma14": self.ma14,
            "ma30": self.ma30,
            "rsi": self.rsi,
            "macd": asdict(self.macd),
            "bollingerBands": {
                "upper": self.bollinger.upper,
                "middle": self.bollinger.middle,
                "lower": self.bollinger.lower,
                "position": self.bollinger.position.value,
            },
            "support": self.support,
            "resistance": self.resistance,
            "volatility": self.volatility,
        }


@dataclass(frozen=True)
class MarketSignals:
    """센티먼트 계산용 보조 시장 신호 (모두 선택)"""
    global_market_cap_change_24h: float | None = None
    btc_dominance: float | None = None
    trending_ids: list[str] | None = None
    coin_id: str | None = None
    market_cap: float | None = None
    volume_24h: float | None = None


@dataclass(frozen=True)
class SentimentSet:
    """0~100 센티먼트 점수"""
    global_sentiment: float
    trending_sentiment: float
    volume_sentiment: float
    coin_specific_sentiment: float
    fear_greed_index: float

    def to_dict(self) -> dict:
        return {
            "globalSentiment": self.global_sentiment,
            "trendingSentiment": self.trending_sentiment,
            "volumeSentiment": self.volume_sentiment,
            "coinSpecificSentiment": self.coin_specific_sentiment,
            "fearGreedIndex": self.fear_greed_index,
        }


@dataclass(frozen=True)
class PriceRange:
    low: float
    high: float


@dataclass(frozen=True)
class ForecastDay:
    """하루치 예보"""
    date: date
    price: float
    price_range: PriceRange
    confidence: int
    weather_icon: WeatherIcon
    volatility_tier: VolatilityTier

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "price": self.price,
            "priceRange": {"low": self.price_range.low, "high": self.price_range.high},
            "confidence": self.confidence,
            "weather": self.weather_icon.value,
            "volatility": self.volatility_tier.value,
        }


@dataclass(frozen=True)
class ForecastResult:
    """5일 예보 결과"""
    coin: str
    symbol: str
    current_price: float
    forecast: list[ForecastDay]
    technicals: IndicatorSet
    sentiment: SentimentSet
    summary: str
    disclaimer: str

    def to_dict(self) -> dict:
        return {
            "coin": self.coin,
            "symbol": self.symbol,
            "currentPrice": self.current_price,
            "forecast": [day.to_dict() for day in self.forecast],
            "technicals": self.technicals.to_dict(),
            "sentiment": self.sentiment.to_dict(),
            "summary": self.summary,
            "disclaimer": self.disclaimer,
        }
