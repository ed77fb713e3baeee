from fastapi import APIRouter, Depends

from alphaflow.api.deps import get_actor, get_state
from alphaflow.models import User
from alphaflow.schemas.pos import CartAdd, CartClient, CartQuantity, FinalizeRequest
from alphaflow.services.app_state import AppState

router = APIRouter()


def _cart_payload(state: AppState) -> dict:
    return {
        "items": state.cart.items,
        "client_id": state.cart.client_id,
        "total": state.cart.total,
    }


@router.get("/cart")
def get_cart(actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    return _cart_payload(state)


@router.post("/cart/items")
def add_to_cart(body: CartAdd, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    state.add_to_cart(body.item_id, body.item_type)
    return _cart_payload(state)


@router.patch("/cart/items/{item_id}")
def update_quantity(
    item_id: str,
    body: CartQuantity,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    state.update_cart_quantity(item_id, body.delta)
    return _cart_payload(state)


@router.delete("/cart/items/{item_id}")
def remove_from_cart(item_id: str, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    state.remove_from_cart(item_id)
    return _cart_payload(state)


@router.put("/cart/client")
def select_client(body: CartClient, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    state.select_cart_client(body.client_id)
    return _cart_payload(state)


@router.post("/checkout")
def finalize_sale(body: FinalizeRequest, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    """Завершает продажу и возвращает данные чека"""
    return state.finalize_sale(body.payment_method)
