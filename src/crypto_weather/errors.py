"""예외 정의"""


class ForecastError(ValueError):
    """지표/예보 계산 실패 (호출 측에서 mock 예보로 대체)"""


class InsufficientDataError(ForecastError):
    """사용 가능한 가격 샘플 부족"""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient price data for technical analysis "
            f"(need {required} positive samples, got {available})"
        )


class InvalidInputError(ForecastError):
    """잘못된 입력 (비유한 가격, 0 이하 현재가, 알 수 없는 confidence 토큰)"""


class MarketDataError(RuntimeError):
    """시세/히스토리 조회 실패"""
