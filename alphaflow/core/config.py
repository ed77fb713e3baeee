import os
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Определяем, какой .env файл загружать
env_file_path = os.getenv("ENV_FILE", ".env")
# Явно загружаем переменные окружения до создания настроек
load_dotenv(env_file_path)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=env_file_path,
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # Общие настройки заведения
    SYSTEM_NAME: str = "AlphaFlow"
    APP_MODE: str = "BARBER"  # "BARBER" или "CLINIC"
    TIMEZONE: str = "America/Sao_Paulo"

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_COLORS: bool = True

    # Gemini Configuration
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_TIMEOUT_SECONDS: float = 20.0
    AI_CACHE_TTL_SECONDS: int = 600

    # Supabase (внешний провайдер аутентификации)
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    IDENTITY_TIMEOUT_SECONDS: float = 10.0


# Глобальная переменная для ленивой инициализации
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Получить или создать экземпляр настроек"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


# Экземпляр, используемый во всем приложении
settings = get_settings()
