import logging

from fastapi import APIRouter, Depends

from alphaflow.api.deps import get_actor, get_state
from alphaflow.models import User
from alphaflow.schemas.auth import LoginRequest, LoginResponse
from alphaflow.schemas.team import UserOut
from alphaflow.services.app_state import AppState

# Получаем логгер для этого модуля
logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, state: AppState = Depends(get_state)):
    """
    Вход по e-mail и паролю.
    Ошибка провайдера возвращается как success=False с сообщением, без HTTP-ошибки.
    """
    result = await state.login(body.email, body.password)
    if not result.success:
        return LoginResponse(success=False, message=result.message)
    return LoginResponse(success=True, user=UserOut.from_user(result.user))


@router.post("/logout")
def logout(state: AppState = Depends(get_state)):
    state.logout()
    return {"status": "ok"}


@router.get("/me", response_model=UserOut)
def me(actor: User = Depends(get_actor)):
    return UserOut.from_user(actor)
