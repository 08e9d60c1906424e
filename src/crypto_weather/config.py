"""환경 변수 기반 설정"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from crypto_weather.cache import DEFAULT_TTL_SECONDS


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _optional_int(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    return int(value)


@dataclass
class Settings:
    """애플리케이션 설정"""
    coingecko_api_key: str | None = None
    cache_ttl_seconds: float = DEFAULT_TTL_SECONDS
    request_timeout: float = 30
    history_days: int = 30
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    forecast_seed: int | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """.env 로드 후 환경 변수에서 설정 생성"""
        load_dotenv()

        return cls(
            coingecko_api_key=os.getenv("COINGECKO_API_KEY") or None,
            cache_ttl_seconds=float(os.getenv("CACHE_TTL_SECONDS", DEFAULT_TTL_SECONDS)),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30")),
            history_days=int(os.getenv("HISTORY_DAYS", "30")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "http://localhost:3000")),
            forecast_seed=_optional_int(os.getenv("FORECAST_SEED")),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
