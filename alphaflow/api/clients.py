from typing import Optional

from fastapi import APIRouter, Depends

from alphaflow.api.deps import get_actor, get_state
from alphaflow.models import User, VisagismProfile
from alphaflow.schemas.client import ClientCreate, ClientUpdate
from alphaflow.services.app_state import AppState

router = APIRouter()


@router.get("")
def list_clients(q: Optional[str] = None, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    return state.clients.search(q) if q else state.clients.get_all()


@router.post("")
def create_client(body: ClientCreate, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    return state.add_client(body.model_dump())


@router.get("/{client_id}")
def get_client(client_id: str, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    return state.clients.get_or_raise(client_id)


@router.patch("/{client_id}")
def update_client(
    client_id: str,
    body: ClientUpdate,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    return state.update_client(client_id, body.model_dump(exclude_unset=True))


@router.put("/{client_id}/visagism")
def save_visagism(
    client_id: str,
    profile: VisagismProfile,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    """Сохраняет профиль визажизма и возвращает подходящие товары"""
    client = state.save_visagism_profile(client_id, profile)
    return {
        "client": client,
        "recommendations": state.visagism_recommendations(profile),
    }
