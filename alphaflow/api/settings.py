from fastapi import APIRouter, Depends

from alphaflow.api.deps import get_actor, get_state
from alphaflow.models import User
from alphaflow.schemas.settings import ModeChange, SystemConfigUpdate
from alphaflow.services.app_state import AppState

router = APIRouter()


@router.get("")
def get_settings_view(actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    return {"config": state.system_config, "mode": state.mode}


@router.patch("")
def update_system_config(
    body: SystemConfigUpdate,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    return state.update_system_config(actor, body.model_dump(exclude_unset=True))


@router.put("/mode")
def set_mode(body: ModeChange, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    """Смена режима заведения пересобирает каталог услуг"""
    mode = state.set_mode(actor, body.mode)
    return {"mode": mode, "services": state.services.get_all()}
