import logging
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from alphaflow.core.config import settings
from alphaflow.models import User, UserRole
from alphaflow.repositories.base import generate_id

# Получаем логгер для этого модуля
logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid login credentials"
UNEXPECTED_ERROR_MESSAGE = "Ocorreu um erro inesperado."


@dataclass
class AuthResult:
    success: bool
    user: Optional[User] = None
    reason: Optional[str] = None

    @property
    def message(self) -> str:
        """Сообщение для пользователя"""
        if self.success:
            return ""
        if self.reason == UNEXPECTED_ERROR_MESSAGE:
            return self.reason
        return f"Erro ao entrar: {self.reason}"


class IdentityService:
    """
    Аутентификация через внешнего провайдера (Supabase, grant_type=password).

    Если Supabase не настроен, пароль проверяется по локальному списку
    сотрудников. Ошибки провайдера никогда не пробрасываются наружу.
    """

    def __init__(
        self,
        find_user_by_email: Callable[[str], Optional[User]],
        supabase_url: Optional[str] = None,
        anon_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.find_user_by_email = find_user_by_email
        self.supabase_url = (supabase_url if supabase_url is not None else settings.SUPABASE_URL) or None
        self.anon_key = anon_key if anon_key is not None else settings.SUPABASE_ANON_KEY
        self.timeout = timeout if timeout is not None else settings.IDENTITY_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def remote_enabled(self) -> bool:
        return bool(self.supabase_url and self.anon_key)

    async def authenticate(self, email: str, password: str) -> AuthResult:
        logger.info(f"🔐 [AUTH] Попытка входа: email='{email}'")
        if not email or not password:
            return AuthResult(success=False, reason=INVALID_CREDENTIALS)

        if not self.remote_enabled:
            return self._authenticate_locally(email, password)

        try:
            return await self._authenticate_remote(email, password)
        except httpx.TimeoutException:
            logger.error(f"❌ [AUTH] Таймаут провайдера аутентификации ({self.timeout} c)")
            return AuthResult(success=False, reason="Tempo de resposta do servidor de autenticação esgotado")
        except httpx.HTTPError as e:
            logger.error(f"❌ [AUTH] HTTP ошибка провайдера: {e}")
            return AuthResult(success=False, reason=UNEXPECTED_ERROR_MESSAGE)

    def _authenticate_locally(self, email: str, password: str) -> AuthResult:
        user = self.find_user_by_email(email)
        if user is None or user.password != password:
            logger.warning(f"⚠️ [AUTH] Неверные учетные данные: email='{email}'")
            return AuthResult(success=False, reason=INVALID_CREDENTIALS)
        logger.info(f"✅ [AUTH] Локальный вход выполнен: user_id={user.id}")
        return AuthResult(success=True, user=user)

    async def _authenticate_remote(self, email: str, password: str) -> AuthResult:
        url = f"{self.supabase_url.rstrip('/')}/auth/v1/token"
        headers = {"apikey": self.anon_key, "Content-Type": "application/json"}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                url,
                params={"grant_type": "password"},
                json={"email": email, "password": password},
                headers=headers
            )

        if response.status_code != 200:
            reason = self._extract_reason(response)
            logger.warning(f"⚠️ [AUTH] Провайдер отклонил вход: status={response.status_code}, reason='{reason}'")
            return AuthResult(success=False, reason=reason)

        remote_user = response.json().get("user") or {}
        user = self._map_remote_user(email, remote_user)
        logger.info(f"✅ [AUTH] Вход через Supabase выполнен: user_id={user.id}")
        return AuthResult(success=True, user=user)

    @staticmethod
    def _extract_reason(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"
        return (
            data.get("error_description")
            or data.get("msg")
            or data.get("message")
            or data.get("error")
            or f"HTTP {response.status_code}"
        )

    def _map_remote_user(self, email: str, remote_user: dict) -> User:
        """Сопоставляет пользователя провайдера с локальным сотрудником по e-mail"""
        local_user = self.find_user_by_email(remote_user.get("email") or email)
        if local_user is not None:
            return local_user

        metadata = remote_user.get("user_metadata") or {}
        try:
            role = UserRole(str(metadata.get("role", UserRole.PROFESSIONAL.value)).upper())
        except ValueError:
            role = UserRole.PROFESSIONAL

        return User(
            id=remote_user.get("id") or generate_id(),
            name=metadata.get("name") or email.split("@")[0],
            email=remote_user.get("email") or email,
            role=role,
            avatar_url=metadata.get("avatar_url"),
        )
