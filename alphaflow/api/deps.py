"""
Зависимости FastAPI: состояние приложения и текущий пользователь.
"""

from typing import Optional

from fastapi import Depends, Header

from alphaflow.core.exceptions import AuthenticationError
from alphaflow.models import User
from alphaflow.services.app_state import AppState, get_app_state


def get_state() -> AppState:
    return get_app_state()


def get_actor(
    x_user_id: Optional[str] = Header(default=None),
    state: AppState = Depends(get_state)
) -> User:
    """Пользователь, от имени которого выполняется запрос (заголовок X-User-Id)"""
    if not x_user_id:
        raise AuthenticationError("Cabeçalho X-User-Id ausente")
    user = state.users.get_by_id(x_user_id)
    if user is None:
        raise AuthenticationError(f"Usuário desconhecido: {x_user_id}")
    return user
