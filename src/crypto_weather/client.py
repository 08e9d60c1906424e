"""CoinGecko API 클라이언트"""

import logging
from datetime import datetime

import pandas as pd
import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from crypto_weather.errors import MarketDataError
from crypto_weather.models import CoinQuote, MarketSignals, PricePoint

logger = logging.getLogger(__name__)


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def parse_quote(coin: dict) -> CoinQuote:
    """/coins/markets 항목 → CoinQuote"""
    return CoinQuote(
        id=coin["id"],
        symbol=coin["symbol"],
        name=coin["name"],
        current_price=coin.get("current_price") or 0.0,
        price_change_24h=coin.get("price_change_24h") or 0.0,
        price_change_percentage_24h=coin.get("price_change_percentage_24h") or 0.0,
        market_cap=coin.get("market_cap") or 0.0,
        market_cap_rank=coin.get("market_cap_rank"),
        total_volume=coin.get("total_volume") or 0.0,
        last_updated=_parse_timestamp(coin.get("last_updated")),
    )


class CoinGeckoClient:
    """
    CoinGecko 공개 API 클라이언트
    - 무료 티어 (API 키 없이 30 calls/min)
    - API 키가 있으면 Pro 엔드포인트 사용
    """

    BASE_URL = "https://api.coingecko.com/api/v3"
    PRO_BASE_URL = "https://pro-api.coingecko.com/api/v3"

    def __init__(self, api_key: str | None = None, timeout: float = 30):
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = self.PRO_BASE_URL if api_key else self.BASE_URL
        self.headers = {"Accept": "application/json"}
        if api_key:
            self.headers["x-cg-pro-api-key"] = api_key

    @retry(
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def _request(self, endpoint: str, params: dict | None = None) -> dict | list:
        """API 요청 (연결 오류 재시도)"""
        url = f"{self.base_url}{endpoint}"
        response = requests.get(url, headers=self.headers, params=params or {}, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def get_coin_markets(
        self,
        ids: list[str] | None = None,
        per_page: int = 10,
        page: int = 1,
        vs_currency: str = "usd",
    ) -> list[CoinQuote]:
        """시가총액 순 코인 목록 + 시세"""
        params = {
            "vs_currency": vs_currency,
            "order": "market_cap_desc",
            "per_page": per_page,
            "page": page,
            "sparkline": "false",
            "price_change_percentage": "24h",
        }
        if ids:
            params["ids"] = ",".join(i.lower() for i in ids)

        data = self._request("/coins/markets", params)
        if not isinstance(data, list):
            return []
        return [parse_quote(coin) for coin in data]

    def search(self, query: str) -> list[dict]:
        """코인 검색 → [{"id": "bitcoin", "symbol": "BTC", ...}, ...]"""
        data = self._request("/search", {"query": query})
        return data.get("coins", [])

    def get_quote(self, coin: str) -> CoinQuote | None:
        """
        특정 코인 시세 조회

        ID로 먼저 찾고, 없으면 검색 결과 첫 번째 코인으로 재조회
        """
        try:
            quotes = self.get_coin_markets(ids=[coin], per_page=1)
            if quotes:
                return quotes[0]

            matches = self.search(coin)
            if not matches:
                return None
            quotes = self.get_coin_markets(ids=[matches[0]["id"]], per_page=1)
            return quotes[0] if quotes else None
        except requests.RequestException as e:
            logger.warning("CoinGecko quote lookup failed for %s: %s", coin, e)
            return None

    def get_market_chart(self, coin_id: str, days: int = 30) -> list[PricePoint]:
        """
        일봉 가격/시가총액/거래량 히스토리 (오래된 것 → 최신)

        Raises:
            MarketDataError: 요청 실패
        """
        try:
            data = self._request(
                f"/coins/{coin_id}/market_chart",
                {"vs_currency": "usd", "days": days, "interval": "daily"},
            )
        except requests.RequestException as e:
            raise MarketDataError(f"Failed to fetch history for {coin_id}: {e}") from e

        prices = pd.DataFrame(data.get("prices", []), columns=["timestamp", "price"])
        if prices.empty:
            return []

        for key, column in [("market_caps", "market_cap"), ("total_volumes", "volume")]:
            extra = pd.DataFrame(data.get(key, []), columns=["timestamp", column])
            prices = prices.merge(extra, on="timestamp", how="left")

        prices = prices.drop_duplicates(subset=["timestamp"]).sort_values("timestamp")
        prices["timestamp"] = pd.to_datetime(prices["timestamp"], unit="ms")

        return [
            PricePoint(
                timestamp=row.timestamp.to_pydatetime(),
                price=float(row.price),
                market_cap=None if pd.isna(row.market_cap) else float(row.market_cap),
                volume=None if pd.isna(row.volume) else float(row.volume),
            )
            for row in prices.itertuples(index=False)
        ]

    def get_global_data(self) -> dict:
        """
        글로벌 시장 데이터

        Returns:
            {
                "market_cap_change_percentage_24h_usd": 1.23,
                "market_cap_percentage": {"btc": 45.5, "eth": 18.2, ...},
                ...
            }
        """
        result = self._request("/global")
        return result.get("data", {})

    def get_trending_ids(self) -> list[str]:
        """트렌딩 코인 ID 목록"""
        result = self._request("/search/trending")
        return [
            coin["item"]["id"]
            for coin in result.get("coins", [])
            if coin.get("item", {}).get("id")
        ]

    def get_market_signals(self, coin_id: str, quote: CoinQuote | None = None) -> MarketSignals:
        """센티먼트용 보조 신호 수집 (실패한 항목은 비워둠)"""
        global_data = {}
        try:
            global_data = self.get_global_data()
        except requests.RequestException as e:
            logger.warning("Failed to fetch global market data: %s", e)

        trending_ids = None
        try:
            trending_ids = self.get_trending_ids()
        except requests.RequestException as e:
            logger.warning("Failed to fetch trending coins: %s", e)

        return MarketSignals(
            global_market_cap_change_24h=global_data.get("market_cap_change_percentage_24h_usd"),
            btc_dominance=global_data.get("market_cap_percentage", {}).get("btc"),
            trending_ids=trending_ids,
            coin_id=coin_id,
            market_cap=quote.market_cap if quote is not None else None,
            volume_24h=quote.total_volume if quote is not None else None,
        )
