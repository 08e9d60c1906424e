"""
지표 + 보조 시장 신호 기반 센티먼트 추정

네 가지 구성 점수는 모두 중립 50에서 시작해 가감되며,
각각 [0, 100]으로 클램프한 뒤 가중합으로 Fear & Greed 지수를 만든다.
"""

from crypto_weather.models import IndicatorSet, MarketSignals, SentimentSet

NEUTRAL = 50.0

# 구성 점수 가중치 (합 = 1.0)
WEIGHT_GLOBAL = 0.25
WEIGHT_TRENDING = 0.20
WEIGHT_VOLUME = 0.25
WEIGHT_COIN = 0.30

RSI_OVERBOUGHT = 70
RSI_OVERSOLD = 30


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def global_sentiment(signals: MarketSignals) -> float:
    """전체 시장 시가총액 변화 + BTC 도미넌스"""
    score = NEUTRAL
    if signals.global_market_cap_change_24h is not None:
        score += clamp(signals.global_market_cap_change_24h * 2, -25, 25)
    if signals.btc_dominance is not None:
        if signals.btc_dominance > 45:
            score -= 5  # BTC 쏠림 = 위험 회피
        if signals.btc_dominance < 40:
            score += 5  # 알트 시즌
    return clamp(score)


def trending_sentiment(signals: MarketSignals) -> float:
    """트렌딩 목록 활성도 + 해당 코인 포함 여부"""
    score = NEUTRAL
    if signals.trending_ids is not None:
        score += min(20, len(signals.trending_ids) * 2)
        if signals.coin_id and signals.coin_id in signals.trending_ids:
            score += 10
    return clamp(score)


def volume_sentiment(signals: MarketSignals, change_24h: float) -> float:
    """거래량/시가총액 비율"""
    score = NEUTRAL
    if signals.volume_24h and signals.market_cap:
        ratio = signals.volume_24h / signals.market_cap
        if ratio > 0.1:
            score += 15
        if ratio < 0.02:
            score -= 10
        if change_24h > 0:
            score += 10  # 거래량이 상승을 뒷받침
    return clamp(score)


def coin_specific_sentiment(
    indicators: IndicatorSet,
    current_price: float,
    change_24h: float,
) -> float:
    """24h 변동 + RSI/MACD/이동평균 정렬"""
    score = NEUTRAL + clamp(change_24h, -20, 20)

    if indicators.rsi > RSI_OVERBOUGHT:
        score -= 10
    if indicators.rsi < RSI_OVERSOLD:
        score += 10
    if indicators.macd.macd > indicators.macd.signal:
        score += 5

    if current_price > indicators.ma7:
        score += 5
    if indicators.ma7 > indicators.ma14:
        score += 5
    if indicators.ma14 > indicators.ma30:
        score += 5

    return clamp(score)


def estimate_sentiment(
    indicators: IndicatorSet,
    current_price: float,
    change_24h: float,
    signals: MarketSignals | None = None,
) -> SentimentSet:
    """
    센티먼트 점수 계산

    Args:
        indicators: calculate_indicators 결과
        current_price: 현재가
        change_24h: 24시간 변동률 (%)
        signals: 보조 시장 신호 (없으면 해당 구성 점수는 중립)
    """
    signals = signals or MarketSignals()

    g = global_sentiment(signals)
    t = trending_sentiment(signals)
    v = volume_sentiment(signals, change_24h)
    c = coin_specific_sentiment(indicators, current_price, change_24h)

    fear_greed = clamp(
        g * WEIGHT_GLOBAL + t * WEIGHT_TRENDING + v * WEIGHT_VOLUME + c * WEIGHT_COIN
    )

    return SentimentSet(
        global_sentiment=g,
        trending_sentiment=t,
        volume_sentiment=v,
        coin_specific_sentiment=c,
        fear_greed_index=fear_greed,
    )
