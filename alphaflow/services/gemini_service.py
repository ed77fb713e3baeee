import asyncio
import json
import logging
import os
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional

import google.generativeai as genai
from cachetools import TTLCache
from google.oauth2 import service_account

from alphaflow.core.config import settings
from alphaflow.models import Appointment, FinancialRecord

# Получаем логгер для этого модуля
logger = logging.getLogger(__name__)

GENERATIVE_LANGUAGE_SCOPE = "https://www.googleapis.com/auth/generative-language"

NOT_CONFIGURED_MESSAGE = "API Key not configured."
FINANCIAL_FALLBACK = "Erro ao analisar dados financeiros com IA."
SCHEDULING_FALLBACK = "Erro ao gerar sugestão de agendamento."
CHAT_FALLBACK = "Desculpe, estou indisponível no momento."


class CompletionStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


@dataclass
class CompletionResult:
    """Результат запроса к модели: в ожидании, успех или ошибка"""

    status: CompletionStatus
    text: str = ""
    error: Optional[str] = None

    @classmethod
    def pending(cls) -> "CompletionResult":
        return cls(status=CompletionStatus.PENDING)

    @property
    def ok(self) -> bool:
        return self.status == CompletionStatus.SUCCESS


def _to_json(items) -> str:
    return json.dumps([item.model_dump(mode="json") for item in items], ensure_ascii=False)


def financial_analysis_prompt(records: Iterable[FinancialRecord]) -> str:
    return f"""
    Analise os seguintes registros financeiros de um estabelecimento (SaaS de Barbearia/Clínica).
    Dados JSON: {_to_json(records)}

    Por favor, forneça:
    1. Um resumo curto do fluxo de caixa.
    2. Identifique picos ou quedas anormais.
    3. Uma sugestão de ação para melhorar o lucro.

    Responda em formato de texto simples, curto e direto, usando formatação Markdown.
    """


def scheduling_suggestion_prompt(appointments: Iterable[Appointment], day: date) -> str:
    return f"""
    Atue como um assistente de agendamento inteligente.
    Aqui estão os agendamentos para o dia {day.isoformat()}: {_to_json(appointments)}

    Sugira:
    1. Qual o melhor horário livre para encaixar um novo cliente de 45 minutos.
    2. Uma mensagem curta para enviar via WhatsApp para clientes antigos convidando para preencher horários vazios.
    """


def chat_prompt(message: str, context: str) -> str:
    return f"""
    Você é a {settings.SYSTEM_NAME} AI, uma assistente virtual especializada em gestão de Barbearias e Clínicas.
    Contexto do sistema: {context}

    Pergunta do usuário: {message}

    Responda de forma profissional, moderna e prestativa.
    """


class GeminiService:
    """
    Сервис для получения текстовых ответов от модели Gemini через Google AI SDK.

    Каждый запрос ограничен таймаутом и никогда не поднимает исключение наружу:
    при ошибке возвращается FAILURE с текстом-заглушкой.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        timeout: Optional[float] = None,
        cache_ttl: Optional[int] = None
    ):
        self.model_name = model_name or settings.GEMINI_MODEL
        self.timeout = timeout if timeout is not None else settings.GEMINI_TIMEOUT_SECONDS
        # Кэш удачных ответов, живет AI_CACHE_TTL_SECONDS
        self._cache = TTLCache(maxsize=64, ttl=cache_ttl if cache_ttl is not None else settings.AI_CACHE_TTL_SECONDS)
        self._model = None
        self.configured = self._configure(api_key if api_key is not None else settings.GEMINI_API_KEY)

    def _configure(self, api_key: Optional[str]) -> bool:
        """
        Конфигурирует SDK. Поддерживает 3 варианта:
        1. GEMINI_API_KEY - ключ API
        2. GOOGLE_APPLICATION_CREDENTIALS_JSON - JSON сервисного аккаунта в переменной
        3. GOOGLE_APPLICATION_CREDENTIALS - путь к файлу сервисного аккаунта

        Returns:
            True, если модель можно вызывать
        """
        if api_key:
            genai.configure(api_key=api_key)
        else:
            credentials = self._load_credentials()
            if credentials is None:
                logger.warning("⚠️ [GEMINI] Ключ API не настроен, AI-функции отключены")
                return False
            genai.configure(credentials=credentials)

        self._model = genai.GenerativeModel(self.model_name)
        logger.info(f"✅ [GEMINI] Модель {self.model_name} готова, таймаут {self.timeout} c")
        return True

    def _load_credentials(self) -> Optional[service_account.Credentials]:
        credentials_json = os.getenv("GOOGLE_APPLICATION_CREDENTIALS_JSON")
        if credentials_json:
            return service_account.Credentials.from_service_account_info(
                json.loads(credentials_json),
                scopes=[GENERATIVE_LANGUAGE_SCOPE]
            )

        credentials_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
        if credentials_path and os.path.isfile(credentials_path):
            return service_account.Credentials.from_service_account_file(
                credentials_path,
                scopes=[GENERATIVE_LANGUAGE_SCOPE]
            )
        return None

    def _generate_sync(self, prompt: str) -> str:
        response = self._model.generate_content(prompt)
        return response.text

    async def complete(self, prompt: str, fallback: str = CHAT_FALLBACK) -> CompletionResult:
        """
        Отправляет промпт модели и ждет ответ не дольше self.timeout секунд.

        Args:
            prompt: Текст запроса
            fallback: Текст, который увидит пользователь при ошибке

        Returns:
            CompletionResult со статусом SUCCESS или FAILURE
        """
        if not self.configured:
            return CompletionResult(status=CompletionStatus.FAILURE, text=NOT_CONFIGURED_MESSAGE, error="not_configured")

        if prompt in self._cache:
            logger.debug("🔍 [GEMINI] Ответ взят из кэша")
            return CompletionResult(status=CompletionStatus.SUCCESS, text=self._cache[prompt])

        # Используем asyncio для выполнения синхронного вызова SDK
        loop = asyncio.get_running_loop()
        try:
            text = await asyncio.wait_for(
                loop.run_in_executor(None, lambda: self._generate_sync(prompt)),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.error(f"❌ [GEMINI] Таймаут ответа модели ({self.timeout} c)")
            return CompletionResult(status=CompletionStatus.FAILURE, text=fallback, error="timeout")
        except Exception as e:
            logger.error(f"❌ [GEMINI] Ошибка: {str(e)}")
            return CompletionResult(status=CompletionStatus.FAILURE, text=fallback, error=str(e))

        if not text:
            logger.warning("⚠️ [GEMINI] Пустой ответ модели")
            return CompletionResult(status=CompletionStatus.FAILURE, text=fallback, error="empty_response")

        self._cache[prompt] = text
        return CompletionResult(status=CompletionStatus.SUCCESS, text=text)

    async def get_financial_analysis(self, records: Iterable[FinancialRecord]) -> CompletionResult:
        return await self.complete(financial_analysis_prompt(records), FINANCIAL_FALLBACK)

    async def get_smart_scheduling_suggestion(self, appointments: Iterable[Appointment], day: date) -> CompletionResult:
        return await self.complete(scheduling_suggestion_prompt(appointments, day), SCHEDULING_FALLBACK)

    async def chat(self, message: str, context: str) -> CompletionResult:
        return await self.complete(chat_prompt(message, context), CHAT_FALLBACK)


# Единственный экземпляр сервиса
gemini_service = None


def get_gemini_service() -> GeminiService:
    """
    Получает единственный экземпляр GeminiService с ленивой инициализацией.
    """
    global gemini_service
    if gemini_service is None:
        gemini_service = GeminiService()
    return gemini_service
