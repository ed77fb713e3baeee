from typing import Optional

from fastapi import APIRouter, Depends

from alphaflow.api.deps import get_actor, get_state
from alphaflow.models import User
from alphaflow.services.app_state import AppState

router = APIRouter()


@router.get("")
def get_dashboard(
    professional_id: Optional[str] = None,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    return state.dashboard_view(actor, professional_id)
