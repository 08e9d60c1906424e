"""
Crypto Weather
암호화폐 시세를 날씨 비유로 보여주는 대시보드 백엔드 + 5일 예보 생성기
"""

import logging
import random
from dataclasses import dataclass, field

from crypto_weather.cache import TTLCache
from crypto_weather.client import CoinGeckoClient
from crypto_weather.config import Settings
from crypto_weather.errors import (
    ForecastError,
    InsufficientDataError,
    InvalidInputError,
    MarketDataError,
)
from crypto_weather.forecast import DISCLAIMER, compute_forecast
from crypto_weather.indicators import MIN_PRICE_POINTS, calculate_indicators
from crypto_weather.market import (
    FALLBACK_COINS,
    MarketDataProvider,
    normalize_coin_id,
    simulated_quote,
    synthetic_history,
    volatility_score,
)
from crypto_weather.models import (
    CoinQuote,
    ConfidenceLevel,
    ForecastResult,
    IndicatorSet,
    MarketSignals,
    SentimentSet,
)
from crypto_weather.presentation import forecast_payload, mock_forecast, quick_weather
from crypto_weather.sentiment import estimate_sentiment

__version__ = "0.1.0"
__all__ = [
    "CryptoWeatherService",
    "ForecastContext",
    "CoinGeckoClient",
    "TTLCache",
    "Settings",
    "calculate_indicators",
    "estimate_sentiment",
    "compute_forecast",
    "DISCLAIMER",
    "ConfidenceLevel",
    "IndicatorSet",
    "SentimentSet",
    "ForecastResult",
    "ForecastError",
    "InsufficientDataError",
    "InvalidInputError",
    "MarketDataError",
]

logger = logging.getLogger(__name__)


@dataclass
class ForecastContext:
    """요청 처리에 필요한 연결/설정 상태 (명시적으로 생성해서 주입)"""
    provider: MarketDataProvider
    rng: random.Random = field(default_factory=random.Random)
    history_days: int = 30

    @property
    def history_window(self) -> int:
        """지표 계산에 필요한 최소 길이 이상으로 맞춘 히스토리 일수"""
        return max(self.history_days, MIN_PRICE_POINTS)


class CryptoWeatherService:
    """시세 조회 + 날씨 예보 통합 서비스"""

    def __init__(self, context: ForecastContext):
        self.context = context

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "CryptoWeatherService":
        settings = settings or Settings.from_env()
        client = CoinGeckoClient(settings.coingecko_api_key, timeout=settings.request_timeout)
        cache = TTLCache(default_ttl=settings.cache_ttl_seconds)
        provider = MarketDataProvider(client, cache, ttl=settings.cache_ttl_seconds)
        context = ForecastContext(
            provider=provider,
            rng=random.Random(settings.forecast_seed),
            history_days=settings.history_days,
        )
        logger.info("CryptoWeatherService initialized (cache TTL: %ss)", settings.cache_ttl_seconds)
        return cls(context)

    @property
    def provider(self) -> MarketDataProvider:
        return self.context.provider

    def get_crypto(self, coin: str, force_refresh: bool = False) -> dict | None:
        """시세 + 현재 날씨 + 간이 5단계 예보 (없는 코인은 None)"""
        coin_id = normalize_coin_id(coin)
        quote = self.provider.get_quote(coin_id, force_refresh=force_refresh)

        if quote is None:
            if coin_id != "bitcoin":
                return None
            logger.warning("Using fallback quote for bitcoin")
            quote = FALLBACK_COINS["bitcoin"]

        weather, forecast = quick_weather(
            quote.current_price, quote.price_change_percentage_24h, self.context.rng
        )
        data = quote.to_dict()
        data["weather"] = weather.value
        data["forecast"] = forecast
        return data

    def get_popular(self) -> list[dict]:
        """시가총액 상위 코인 (API 실패 시 BTC/ETH 정적 데이터)"""
        try:
            quotes = self.provider.get_popular()
        except MarketDataError as e:
            logger.warning("Popular coins unavailable, using fallback: %s", e)
            quotes = [FALLBACK_COINS["bitcoin"], FALLBACK_COINS["ethereum"]]
        return [quote.to_dict() for quote in quotes]

    def get_history(self, coin: str, days: int = 30) -> list[dict]:
        """일봉 히스토리 (MarketDataError 전파)"""
        return [
            {
                "timestamp": point.timestamp.isoformat(),
                "price": point.price,
                "market_cap": point.market_cap,
                "volume": point.volume,
            }
            for point in self.provider.get_history(coin, days)
        ]

    def forecast(
        self,
        coin: str,
        confidence: str = "moderate",
        live: bool = False,
    ) -> dict:
        """
        5일 날씨 예보

        - live=True: CoinGecko 실제 히스토리 + 시장 신호, 실패 시 시뮬레이션 예보
        - live=False: 현재가 기준 합성 히스토리로 예보
        - 어떤 방식도 불가능하면 mock 예보 (fallback=True)
        """
        coin_id = normalize_coin_id(coin)
        try:
            level = ConfidenceLevel.parse(confidence)
            source = "simulated"
            if live:
                try:
                    result = self._live_forecast(coin_id, level)
                    source = "live"
                except (ForecastError, MarketDataError) as e:
                    logger.info("Live forecast failed for %s, falling back to simulation: %s", coin_id, e)
                    result = self._simulated_forecast(coin_id, level)
            else:
                result = self._simulated_forecast(coin_id, level)
        except (ForecastError, MarketDataError) as e:
            logger.warning("Forecast unavailable for %s: %s", coin_id, e)
            return mock_forecast(str(e))

        payload = forecast_payload(result)
        payload["source"] = source
        return payload

    def _live_forecast(self, coin_id: str, level: ConfidenceLevel) -> ForecastResult:
        quote = self.provider.get_quote(coin_id)
        if quote is None:
            raise MarketDataError(f"No quote available for {coin_id}")

        history = self.provider.get_history(quote.id, self.context.history_window)
        signals = self.provider.get_signals(quote.id, quote)
        return compute_forecast(
            history,
            quote.current_price,
            quote.price_change_percentage_24h,
            signals=signals,
            confidence_level=level,
            rng=self.context.rng,
            coin=quote.name,
            symbol=quote.symbol,
        )

    def _simulated_forecast(self, coin_id: str, level: ConfidenceLevel) -> ForecastResult:
        quote = self._current_quote(coin_id)
        history = synthetic_history(
            quote.current_price,
            self.context.history_window,
            volatility_score(quote.price_change_percentage_24h),
            self.context.rng,
        )
        signals = MarketSignals(
            coin_id=quote.id,
            market_cap=quote.market_cap,
            volume_24h=quote.total_volume,
        )
        return compute_forecast(
            history,
            quote.current_price,
            quote.price_change_percentage_24h,
            signals=signals,
            confidence_level=level,
            rng=self.context.rng,
            coin=quote.name,
            symbol=quote.symbol,
        )

    def _current_quote(self, coin_id: str) -> CoinQuote:
        quote = self.provider.get_quote(coin_id)
        if quote is not None:
            return quote

        logger.info("Using simulated quote for %s", coin_id)
        quote = simulated_quote(coin_id, self.context.rng)
        if quote is None:
            raise MarketDataError(f"Unsupported coin: {coin_id}")
        return quote
