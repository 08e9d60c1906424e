"""FastAPI 서버"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from crypto_weather import CryptoWeatherService
from crypto_weather.config import Settings, configure_logging
from crypto_weather.errors import MarketDataError
from crypto_weather.presentation import mock_forecast

logger = logging.getLogger(__name__)


# ============================================================
# Pydantic Models
# ============================================================


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    service: str


class DataResponse(BaseModel):
    success: bool = True
    data: dict


class ListResponse(BaseModel):
    success: bool = True
    data: list[dict]


class ForecastResponse(BaseModel):
    success: bool = True
    data: dict
    fallback: bool = False


# ============================================================
# Dependencies
# ============================================================


def get_service(request: Request) -> CryptoWeatherService:
    """앱에 등록된 서비스 반환"""
    return request.app.state.service


ServiceDep = Annotated[CryptoWeatherService, Depends(get_service)]


# ============================================================
# App
# ============================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 시작/종료 관리"""
    logger.info("Crypto Weather API starting")
    yield
    logger.info("Crypto Weather API stopped")


def create_app(
    service: CryptoWeatherService | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Crypto Weather API",
        description="Cryptocurrency market data presented as a weather forecast",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.service = service or CryptoWeatherService.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ========================================================
    # Endpoints
    # ========================================================

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check():
        """서비스 상태 확인"""
        return HealthResponse(
            status="OK",
            timestamp=datetime.now(timezone.utc).isoformat(),
            service="crypto-weather-backend",
        )

    @app.get("/crypto", response_model=DataResponse, tags=["Crypto"])
    def get_crypto(
        service: ServiceDep,
        coin: Annotated[str, Query(description="CoinGecko 코인 ID (예: bitcoin)")] = "bitcoin",
        refresh: Annotated[bool, Query(description="캐시 무시")] = False,
    ):
        """코인 시세 + 날씨"""
        data = service.get_crypto(coin, force_refresh=refresh)
        if data is None:
            raise HTTPException(status_code=404, detail="Cryptocurrency not found")
        return DataResponse(data=data)

    @app.get("/crypto/popular", response_model=ListResponse, tags=["Crypto"])
    def get_popular(service: ServiceDep):
        """시가총액 상위 코인"""
        return ListResponse(data=service.get_popular())

    @app.get("/crypto/history", response_model=ListResponse, tags=["Crypto"])
    def get_history(
        service: ServiceDep,
        id: Annotated[str | None, Query(description="CoinGecko 코인 ID")] = None,
        days: Annotated[int, Query(ge=1, le=365)] = 30,
    ):
        """일봉 가격 히스토리"""
        if not id:
            raise HTTPException(status_code=400, detail="Crypto ID is required")
        try:
            history = service.get_history(id, days)
        except MarketDataError as e:
            logger.warning("History lookup failed: %s", e)
            raise HTTPException(status_code=502, detail="Failed to fetch crypto history")
        return ListResponse(data=history)

    @app.get("/forecast", response_model=ForecastResponse, tags=["Forecast"])
    def get_forecast(
        service: ServiceDep,
        coin: str = "bitcoin",
        confidence: Annotated[
            str, Query(description="conservative | moderate | aggressive")
        ] = "moderate",
        mock: bool = False,
        live: bool = False,
    ):
        """
        5일 날씨 예보

        - **coin**: CoinGecko 코인 ID
        - **confidence**: 예측 강도
        - **mock**: 고정 mock 데이터 반환
        - **live**: 실제 히스토리 사용 (실패 시 시뮬레이션)
        """
        data = mock_forecast() if mock else service.forecast(coin, confidence, live=live)
        fallback = data.pop("fallback", False)
        return ForecastResponse(data=data, fallback=fallback)

    return app
