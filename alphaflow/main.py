import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from alphaflow.api import (
    assistant,
    auth,
    catalog,
    clients,
    dashboard,
    financial,
    pos,
    schedule,
    settings as settings_api,
    team,
)
from alphaflow.core.config import settings
from alphaflow.core.exceptions import (
    AlphaFlowError,
    AuthenticationError,
    InsufficientStockError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from alphaflow.core.logging_config import log_error
from alphaflow.services.app_state import get_app_state

# Получаем логгер для этого модуля
logger = logging.getLogger(__name__)

app = FastAPI(
    title=f"{settings.SYSTEM_NAME} Business Console",
    version="0.1.0"
)

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(schedule.router, prefix="/schedule", tags=["Schedule"])
app.include_router(pos.router, prefix="/pos", tags=["POS"])
app.include_router(financial.router, prefix="/financial", tags=["Financial"])
app.include_router(catalog.router, prefix="/catalog", tags=["Catalog"])
app.include_router(clients.router, prefix="/clients", tags=["Clients"])
app.include_router(team.router, prefix="/team", tags=["Team"])
app.include_router(settings_api.router, prefix="/settings", tags=["Settings"])
app.include_router(assistant.router, prefix="/assistant", tags=["Assistant"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])


def _status_code_for(error: AlphaFlowError) -> int:
    if isinstance(error, InsufficientStockError):
        return 422
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, PermissionDeniedError):
        return 403
    if isinstance(error, AuthenticationError):
        return 401
    return 500


@app.exception_handler(AlphaFlowError)
async def alphaflow_error_handler(request: Request, exc: AlphaFlowError):
    """Переводит ошибки предметной области в HTTP-ответы"""
    status_code = _status_code_for(exc)
    if status_code == 500:
        log_error(logger, exc, f"{request.method} {request.url.path}")
    else:
        logger.warning(f"⚠️ [API] {request.method} {request.url.path} -> {status_code}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)}
    )


@app.on_event("startup")
async def startup_event():
    """Выполняется при запуске приложения."""
    logger.info("╔═══════════════════════════════════════════════════════════")
    logger.info(f"║ 🚀 {settings.SYSTEM_NAME} запускается...")
    logger.info("╚═══════════════════════════════════════════════════════════")

    state = get_app_state()
    logger.info(f"🏪 STARTUP: Режим заведения: {state.mode.value}")
    logger.info(f"🤖 STARTUP: Gemini ключ настроен: {'Да' if settings.GEMINI_API_KEY else 'Нет'}")
    logger.info(f"🔐 STARTUP: Supabase: {'включен' if state.identity.remote_enabled else 'локальная проверка'}")
    logger.info(f"👥 STARTUP: Сотрудников: {len(state.users)}, услуг: {len(state.services)}, товаров: {len(state.products)}")
    logger.info("✅ STARTUP: Приложение успешно запущено и готово к работе")


@app.get("/", tags=["Root"])
def root():
    """Корневой эндпоинт для проверки доступности сервиса."""
    return {
        "status": "OK",
        "message": f"{settings.SYSTEM_NAME} is running",
        "version": "0.1.0"
    }


@app.get("/healthcheck", tags=["Health Check"])
def health_check():
    """Простой эндпоинт для проверки работоспособности сервиса."""
    state = get_app_state()
    return {
        "status": "OK",
        "mode": state.mode.value,
        "ai": "enabled" if settings.GEMINI_API_KEY else "disabled"
    }
