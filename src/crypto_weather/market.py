"""
시세/히스토리 조회 계층

- CoinGecko → TTL 캐시 순서로 조회
- API를 쓸 수 없을 때를 위한 정적 시세 테이블과 합성 가격 히스토리
"""

import logging
import math
import random
from dataclasses import replace
from datetime import date, datetime

import requests

from crypto_weather.cache import DEFAULT_TTL_SECONDS, TTLCache
from crypto_weather.client import CoinGeckoClient
from crypto_weather.errors import MarketDataError
from crypto_weather.models import CoinQuote, MarketSignals, PricePoint

logger = logging.getLogger(__name__)


# ============================================================
# 정적 시세 (API 실패 시 대체)
# ============================================================

FALLBACK_COINS: dict[str, CoinQuote] = {
    quote.id: quote
    for quote in [
        CoinQuote("bitcoin", "btc", "Bitcoin", 105000, 2850, 2.75, 2_100_000_000_000, 1),
        CoinQuote("ethereum", "eth", "Ethereum", 3900, 125, 3.24, 480_000_000_000, 2),
        CoinQuote("binancecoin", "bnb", "BNB", 700, 28, 4.20, 105_000_000_000, 4),
        CoinQuote("solana", "sol", "Solana", 240, 12.5, 5.38, 118_000_000_000, 5),
        CoinQuote("cardano", "ada", "Cardano", 1.20, 0.065, 5.98, 40_000_000_000, 9),
        CoinQuote("avalanche-2", "avax", "Avalanche", 46.0, 2.15, 4.99, 18_000_000_000, 12),
        CoinQuote("chainlink", "link", "Chainlink", 25.0, 1.25, 5.38, 15_000_000_000, 13),
        CoinQuote("polkadot", "dot", "Polkadot", 9.20, 0.45, 5.35, 13_000_000_000, 15),
        CoinQuote("matic-network", "matic", "Polygon", 0.55, 0.025, 5.06, 5_200_000_000, 20),
    ]
}

# 과거 이름 호환
COIN_ALIASES = {
    "avalanche": "avalanche-2",
    "polygon": "matic-network",
    "bnb": "binancecoin",
}


def normalize_coin_id(coin: str) -> str:
    coin = coin.strip().lower()
    return COIN_ALIASES.get(coin, coin)


def volatility_score(change_24h: float) -> float:
    """24h 변동률 → 합성 히스토리용 연환산 변동성(%)"""
    change = abs(change_24h)
    if change > 20:
        return 80.0
    if change > 10:
        return 60.0
    if change > 5:
        return 40.0
    if change > 2:
        return 25.0
    return 15.0


def simulated_quote(
    coin_id: str,
    rng: random.Random,
    today: date | None = None,
) -> CoinQuote | None:
    """정적 시세에 연간 사이클 + ±2% 일간 변동을 적용"""
    base = FALLBACK_COINS.get(normalize_coin_id(coin_id))
    if base is None:
        return None

    today = today or date.today()
    day_of_year = today.timetuple().tm_yday
    market_cycle = math.sin(day_of_year / 365 * 2 * math.pi) * 0.1
    daily_variation = (rng.random() - 0.5) * 0.04

    price = base.current_price * (1 + market_cycle + daily_variation)
    change = price * (rng.random() - 0.5) * 0.08

    return replace(
        base,
        current_price=price,
        price_change_24h=change,
        price_change_percentage_24h=change / price * 100,
        last_updated=datetime.now(),
    )


def synthetic_history(
    current_price: float,
    days: int,
    annualized_volatility: float,
    rng: random.Random,
) -> list[float]:
    """
    현재가에서 거꾸로 걸어가는 랜덤 워크 히스토리 (오래된 것 → 최신)

    주간 사이클 + 감쇠 모멘텀, 현재가의 50% 아래로는 내려가지 않음
    """
    daily_vol = annualized_volatility / 100 / math.sqrt(365)
    prices = [current_price]
    for i in range(1, days):
        random_walk = (rng.random() - 0.5) * 2 * daily_vol
        weekly_cycle = math.sin(i / 7) * 0.01
        momentum = math.exp(-i / 20) * 0.02
        price = prices[-1] * (1 + random_walk + weekly_cycle + momentum)
        prices.append(max(price, current_price * 0.5))
    prices.reverse()
    return prices


# ============================================================
# 캐시 경유 조회
# ============================================================

class MarketDataProvider:
    """시세/히스토리 소스 (CoinGecko + TTL 캐시)"""

    def __init__(
        self,
        client: CoinGeckoClient,
        cache: TTLCache | None = None,
        ttl: float = DEFAULT_TTL_SECONDS,
    ):
        self.client = client
        self.cache = cache if cache is not None else TTLCache(default_ttl=ttl)
        self.ttl = ttl

    def get_quote(self, coin: str, force_refresh: bool = False) -> CoinQuote | None:
        """현재 시세 (캐시 → API → 캐시 저장)"""
        coin_id = normalize_coin_id(coin)
        key = f"quote:{coin_id}"

        if not force_refresh:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        quote = self.client.get_quote(coin_id)
        if quote is not None:
            self.cache.put(key, quote, self.ttl)
            # 검색으로 찾은 경우 실제 ID로도 저장
            self.cache.put(f"quote:{quote.id}", quote, self.ttl)
        return quote

    def get_history(self, coin: str, days: int = 30) -> list[PricePoint]:
        """
        일봉 히스토리

        Raises:
            MarketDataError: 조회 실패
        """
        coin_id = normalize_coin_id(coin)
        key = f"history:{coin_id}:{days}"

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        history = self.client.get_market_chart(coin_id, days=days)
        if history:
            self.cache.put(key, history, self.ttl)
        return history

    def get_popular(self, limit: int = 10) -> list[CoinQuote]:
        """
        시가총액 상위 코인

        Raises:
            MarketDataError: 조회 실패
        """
        key = f"popular:{limit}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            quotes = self.client.get_coin_markets(per_page=limit)
        except requests.RequestException as e:
            raise MarketDataError(f"Failed to fetch popular coins: {e}") from e

        self.cache.put(key, quotes, self.ttl)
        for quote in quotes:
            self.cache.put(f"quote:{quote.id}", quote, self.ttl)
        return quotes

    def get_signals(self, coin_id: str, quote: CoinQuote | None = None) -> MarketSignals:
        return self.client.get_market_signals(normalize_coin_id(coin_id), quote)
