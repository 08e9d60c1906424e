"""CLI 명령어"""

import argparse
import sys

from crypto_weather import CryptoWeatherService
from crypto_weather.config import Settings, configure_logging


def _build_service(seed: int | None = None) -> CryptoWeatherService:
    settings = Settings.from_env()
    if seed is not None:
        settings.forecast_seed = seed
    configure_logging(settings.log_level)
    return CryptoWeatherService.from_settings(settings)


def get_price(coins: list[str]):
    """시세 조회"""
    service = _build_service()

    for coin in coins:
        print(f"\n📊 {coin}")
        print("-" * 40)
        data = service.get_crypto(coin)
        if data is None:
            print(f"  ❌ {coin} not found")
            continue
        print(f"  이름: {data['name']} ({data['symbol'].upper()})")
        print(f"  가격: ${data['price']:,.2f}")
        print(f"  24시간: {data['change24h']:+.2f}%")
        print(f"  시가총액: ${data['market_cap']:,.0f}")
        print(f"  날씨: {data['weather']}")
        for day in data["forecast"]:
            print(f"    {day['day']:<10} {day['weather']}  ${day['price']:,.2f}")


def get_popular():
    """시가총액 상위 코인"""
    service = _build_service()

    print("🌍 인기 코인")
    print("-" * 40)
    for coin in service.get_popular():
        rank = coin["market_cap_rank"] or "-"
        print(f"  #{rank:<3} {coin['symbol'].upper():<6} ${coin['price']:>14,.2f}  {coin['change24h']:+.2f}%")


def get_forecast(coin: str, confidence: str = "moderate", live: bool = False, seed: int | None = None):
    """5일 날씨 예보"""
    service = _build_service(seed)

    print(f"🔮 {coin} 5일 예보 ({confidence})")
    print("=" * 50)
    data = service.forecast(coin, confidence, live=live)

    if data.get("fallback"):
        print("⚠️ 예보를 만들 수 없어 mock 데이터를 표시합니다.")

    weekly = data["weekly"]
    if "symbol" in data:
        print(f"  {data['coin']} ({data['symbol']}) 현재가: ${data['currentPrice']:,.2f}")
        print(f"  데이터: {data['source']}")
    print(f"  전망: {weekly['trend']}")
    print()

    for day in weekly["days"]:
        if "price" in day:
            low, high = day["priceRange"]["low"], day["priceRange"]["high"]
            print(
                f"  {day['day']} {day['weather']}  ${day['price']:,.2f} "
                f"(${low:,.2f} ~ ${high:,.2f})  신뢰도 {day['confidence']}%  변동성 {day['volatility']}"
            )
        else:
            print(f"  {day['day']} {day['weather']}  BTC ${day['btc']:,}  변동성 {day['volatility']}")

    print("\n📣 알림")
    for alert in data["alerts"]:
        print(f"  {alert['icon']} {alert['type']}: {alert['message']}")

    if "disclaimer" in data:
        print(f"\n⚠️  {data['disclaimer']}")


def serve(host: str = "127.0.0.1", port: int = 8080):
    """API 서버 실행"""
    import uvicorn

    uvicorn.run("crypto_weather.api:create_app", factory=True, host=host, port=port)


def main():
    """메인 CLI 진입점"""
    parser = argparse.ArgumentParser(
        prog="crypto-weather",
        description="암호화폐 시세를 날씨로 보여주는 대시보드 백엔드",
    )
    subparsers = parser.add_subparsers(dest="command", help="명령어")

    # price
    price_parser = subparsers.add_parser("price", help="시세 조회")
    price_parser.add_argument("coins", nargs="+", help="코인 ID (예: bitcoin ethereum)")

    # popular
    subparsers.add_parser("popular", help="시가총액 상위 코인")

    # forecast
    forecast_parser = subparsers.add_parser("forecast", help="5일 날씨 예보")
    forecast_parser.add_argument("coin", help="코인 ID (예: bitcoin)")
    forecast_parser.add_argument(
        "--confidence", "-c",
        choices=["conservative", "moderate", "aggressive"],
        default="moderate",
        help="예측 강도 (기본: moderate)",
    )
    forecast_parser.add_argument("--live", action="store_true", help="실제 가격 히스토리 사용")
    forecast_parser.add_argument("--seed", type=int, default=None, help="난수 시드")

    # serve
    serve_parser = subparsers.add_parser("serve", help="API 서버 실행")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8080)

    args = parser.parse_args()

    if args.command == "price":
        get_price(args.coins)
    elif args.command == "popular":
        get_popular()
    elif args.command == "forecast":
        get_forecast(args.coin, args.confidence, args.live, args.seed)
    elif args.command == "serve":
        serve(args.host, args.port)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
