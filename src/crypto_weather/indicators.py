"""
기술적 지표 계산

- 모든 함수는 순수 함수 (난수 없음, 같은 입력 → 같은 출력)
- 가격 배열은 오래된 것 → 최신 순서
"""

import math
from collections.abc import Sequence

import numpy as np
import pandas as pd

from crypto_weather.errors import InsufficientDataError, InvalidInputError
from crypto_weather.models import (
    MACD,
    BandPosition,
    BollingerBands,
    IndicatorSet,
    PricePoint,
)

MIN_PRICE_POINTS = 30
RSI_PERIOD = 14
BOLLINGER_PERIOD = 20
SUPPORT_RESISTANCE_WINDOW = 20
MACD_SIGNAL_RATIO = 0.9  # 시그널 라인 근사 (MACD 히스토리 미보관)
TRADING_DAYS_PER_YEAR = 365


def to_price_array(prices: Sequence[float] | Sequence[PricePoint] | np.ndarray) -> np.ndarray:
    """PricePoint 목록 또는 숫자 배열을 float ndarray로 변환"""
    values = [p.price if isinstance(p, PricePoint) else p for p in prices]
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise InvalidInputError("Price series must be one-dimensional")
    if not np.all(np.isfinite(arr)):
        raise InvalidInputError("Price series contains non-finite values")
    return arr


def sma(prices: np.ndarray, period: int) -> float:
    """단순 이동평균 (데이터 부족 시 최근 가격)"""
    if len(prices) < period:
        return float(prices[-1])
    return float(np.mean(prices[-period:]))


def ema(prices: np.ndarray, period: int) -> float:
    """지수 이동평균 (첫 가격으로 시드, multiplier = 2/(period+1))"""
    if len(prices) < period:
        return float(prices[-1])
    smoothed = pd.Series(prices).ewm(span=period, adjust=False).mean()
    return float(smoothed.iloc[-1])


def rsi(prices: np.ndarray, period: int = RSI_PERIOD) -> float:
    """
    RSI (단순 평균 방식, Wilder 평활화 없음)

    - 데이터가 period + 1개 미만이면 50
    - 평균 손실이 0이면 100 (변화가 전혀 없으면 50)
    """
    if len(prices) < period + 1:
        return 50.0

    deltas = np.diff(prices)[-period:]
    avg_gain = float(np.where(deltas > 0, deltas, 0.0).sum()) / period
    avg_loss = float(np.where(deltas < 0, -deltas, 0.0).sum()) / period

    if avg_loss == 0:
        return 100.0 if avg_gain > 0 else 50.0

    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


def macd(prices: np.ndarray, fast: int = 12, slow: int = 26) -> MACD:
    """MACD = EMA(fast) - EMA(slow)"""
    value = ema(prices, fast) - ema(prices, slow)
    signal = value * MACD_SIGNAL_RATIO
    return MACD(macd=value, signal=signal, histogram=value - signal)


def bollinger_bands(
    prices: np.ndarray,
    current_price: float,
    period: int = BOLLINGER_PERIOD,
    std_dev: float = 2.0,
) -> BollingerBands:
    """볼린저 밴드 (모표준편차), 위치는 ±1σ 기준"""
    middle = sma(prices, period)
    sigma = float(np.std(prices[-period:]))

    if current_price > middle + sigma:
        position = BandPosition.ABOVE
    elif current_price < middle - sigma:
        position = BandPosition.BELOW
    else:
        position = BandPosition.MIDDLE

    return BollingerBands(
        upper=middle + std_dev * sigma,
        middle=middle,
        lower=middle - std_dev * sigma,
        position=position,
    )


def percentile(values: np.ndarray, pct: float) -> float:
    """백분위수 (순서 통계량 간 선형 보간)"""
    return float(np.percentile(values, pct))


def volatility(prices: np.ndarray) -> float:
    """일간 수익률 표준편차의 연환산 값 (%)"""
    if len(prices) < 2:
        return 0.0
    returns = np.diff(prices) / prices[:-1]
    return float(np.std(returns)) * math.sqrt(TRADING_DAYS_PER_YEAR) * 100


def calculate_indicators(
    prices: Sequence[float] | Sequence[PricePoint] | np.ndarray,
    current_price: float,
) -> IndicatorSet:
    """
    가격 배열에서 IndicatorSet 계산

    Args:
        prices: 과거 가격 (오래된 것 → 최신)
        current_price: 현재가

    Raises:
        InvalidInputError: 비유한 값 또는 0 이하 현재가
        InsufficientDataError: 양수 가격이 30개 미만
    """
    if not math.isfinite(current_price) or current_price <= 0:
        raise InvalidInputError(f"Current price must be positive, got {current_price!r}")

    arr = to_price_array(prices)
    arr = arr[arr > 0]
    if len(arr) < MIN_PRICE_POINTS:
        raise InsufficientDataError(MIN_PRICE_POINTS, len(arr))

    recent = arr[-SUPPORT_RESISTANCE_WINDOW:]

    return IndicatorSet(
        ma7=sma(arr, 7),
        ma14=sma(arr, 14),
        ma30=sma(arr, 30),
        rsi=rsi(arr),
        macd=macd(arr),
        bollinger=bollinger_bands(arr, current_price),
        support=percentile(recent, 20),
        resistance=percentile(recent, 80),
        volatility=volatility(arr),
    )
