"""센티먼트 추정 테스트"""

import pytest

from crypto_weather.models import MarketSignals
from crypto_weather.sentiment import (
    coin_specific_sentiment,
    estimate_sentiment,
    global_sentiment,
    trending_sentiment,
    volume_sentiment,
)


class TestComponents:
    """구성 점수 테스트"""

    def test_missing_signals_are_neutral(self):
        signals = MarketSignals()
        assert global_sentiment(signals) == 50.0
        assert trending_sentiment(signals) == 50.0
        assert volume_sentiment(signals, 3.0) == 50.0

    def test_global_clamped_and_dominance(self):
        signals = MarketSignals(global_market_cap_change_24h=30.0, btc_dominance=50.0)
        assert global_sentiment(signals) == 70.0

        alt_season = MarketSignals(global_market_cap_change_24h=-2.0, btc_dominance=38.0)
        assert global_sentiment(alt_season) == 51.0

    def test_trending(self):
        ids = ["pepe", "bitcoin", "sui", "ton", "wif", "bonk", "kas"]
        assert trending_sentiment(MarketSignals(trending_ids=ids, coin_id="bitcoin")) == 74.0
        assert trending_sentiment(MarketSignals(trending_ids=ids * 3, coin_id="dogecoin")) == 70.0

    def test_volume(self):
        heavy = MarketSignals(market_cap=1_000.0, volume_24h=200.0)
        thin = MarketSignals(market_cap=1_000.0, volume_24h=10.0)

        assert volume_sentiment(heavy, 1.5) == 75.0
        assert volume_sentiment(thin, -1.5) == 40.0

    def test_coin_specific_overbought_vs_oversold(self, make_indicators):
        overbought = coin_specific_sentiment(make_indicators(rsi=85.0), 100.0, 0.0)
        oversold = coin_specific_sentiment(make_indicators(rsi=15.0), 100.0, 0.0)
        assert overbought == 40.0
        assert oversold == 60.0

    def test_coin_specific_clamped(self, make_indicators):
        bullish = make_indicators(ma7=99.0, ma14=98.0, ma30=97.0, rsi=15.0, macd=2.0, signal=1.0)
        assert coin_specific_sentiment(bullish, 100.0, 80.0) == 100.0
        assert 0.0 <= coin_specific_sentiment(make_indicators(rsi=90.0), 50.0, -80.0) <= 100.0


class TestEstimateSentiment:
    """estimate_sentiment 테스트"""

    def test_neutral_without_signals(self, make_indicators):
        result = estimate_sentiment(make_indicators(), 100.0, 0.0)
        assert result.fear_greed_index == 50.0
        assert result.coin_specific_sentiment == 50.0

    def test_weighted_composite(self, make_indicators):
        signals = MarketSignals(
            global_market_cap_change_24h=5.0,
            btc_dominance=42.0,
            trending_ids=["bitcoin", "ethereum"],
            coin_id="bitcoin",
            market_cap=1_000.0,
            volume_24h=150.0,
        )
        result = estimate_sentiment(make_indicators(), 101.0, 3.0, signals)

        assert result.global_sentiment == 60.0
        assert result.trending_sentiment == 64.0
        assert result.volume_sentiment == 75.0
        assert result.coin_specific_sentiment == 58.0
        expected = 60.0 * 0.25 + 64.0 * 0.20 + 75.0 * 0.25 + 58.0 * 0.30
        assert result.fear_greed_index == pytest.approx(expected)

    def test_scores_within_bounds(self, make_indicators):
        signals = MarketSignals(global_market_cap_change_24h=-90.0, btc_dominance=70.0)
        result = estimate_sentiment(make_indicators(rsi=95.0), 50.0, -99.0, signals)

        for value in result.to_dict().values():
            assert 0.0 <= value <= 100.0
