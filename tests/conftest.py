import pytest

from crypto_weather.models import (
    MACD,
    BandPosition,
    BollingerBands,
    CoinQuote,
    IndicatorSet,
)


@pytest.fixture
def make_indicators():
    """고정 지표 팩토리 (기본값은 완전 중립)"""

    def _make(
        ma7: float = 100.0,
        ma14: float = 100.0,
        ma30: float = 100.0,
        rsi: float = 50.0,
        macd: float = 0.0,
        signal: float = 0.0,
        volatility: float = 30.0,
    ) -> IndicatorSet:
        return IndicatorSet(
            ma7=ma7,
            ma14=ma14,
            ma30=ma30,
            rsi=rsi,
            macd=MACD(macd=macd, signal=signal, histogram=macd - signal),
            bollinger=BollingerBands(102.0, 100.0, 98.0, BandPosition.MIDDLE),
            support=99.0,
            resistance=101.0,
            volatility=volatility,
        )

    return _make


@pytest.fixture
def btc_quote():
    return CoinQuote(
        id="bitcoin",
        symbol="btc",
        name="Bitcoin",
        current_price=45000.0,
        price_change_24h=1100.0,
        price_change_percentage_24h=2.5,
        market_cap=880_000_000_000.0,
        market_cap_rank=1,
        total_volume=28_000_000_000.0,
    )
