from typing import List

from fastapi import APIRouter, Depends

from alphaflow.api.deps import get_actor, get_state
from alphaflow.models import User
from alphaflow.schemas.team import UserCreate, UserOut, UserUpdate
from alphaflow.services.app_state import AppState

router = APIRouter()


@router.get("", response_model=List[UserOut])
def list_team(actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    return [UserOut.from_user(u) for u in state.users.get_all()]


@router.post("", response_model=UserOut)
def create_user(body: UserCreate, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    return UserOut.from_user(state.add_user(actor, body.model_dump()))


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    body: UserUpdate,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    return UserOut.from_user(state.update_user(actor, user_id, body.model_dump(exclude_unset=True)))
