import argparse

import uvicorn

from alphaflow.core.config import settings
from alphaflow.core.logging_config import setup_logging

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="AlphaFlow API server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8001)
    parser.add_argument("--demo", action="store_true", help="Заполнить состояние демонстрационными данными")
    args = parser.parse_args()

    setup_logging(level=settings.LOG_LEVEL, enable_colors=settings.LOG_COLORS)

    # Состояние живет в памяти процесса, поэтому приложение запускается без reload
    from alphaflow.main import app
    from alphaflow.services.app_state import get_app_state

    if args.demo:
        from scripts.seed_demo_data import seed_demo_data
        seed_demo_data(get_app_state())

    print("\n" + "="*70)
    print(f"   🚀 {settings.SYSTEM_NAME} запущен")
    print("="*70)
    print(f"   📍 URL:         http://{args.host}:{args.port}")
    print(f"   💚 Healthcheck: http://{args.host}:{args.port}/healthcheck")
    print(f"   📖 Docs:        http://{args.host}:{args.port}/docs")
    print("-"*70)
    print(f"   ℹ️  Демо-данные: {'да' if args.demo else 'нет'} (флаг --demo)")
    print("="*70 + "\n")

    uvicorn.run(app, host=args.host, port=args.port)
