from typing import Optional

from fastapi import APIRouter, Depends

from alphaflow.api.deps import get_actor, get_state
from alphaflow.models import User
from alphaflow.schemas.catalog import ProductCreate, ProductUpdate, ServiceCreate, ServiceUpdate
from alphaflow.services.app_state import AppState

router = APIRouter()


@router.get("/services")
def list_services(q: Optional[str] = None, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    return state.services.search_by_name(q) if q else state.services.get_all()


@router.post("/services")
def create_service(body: ServiceCreate, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    return state.add_service(body.model_dump())


@router.patch("/services/{service_id}")
def update_service(
    service_id: str,
    body: ServiceUpdate,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    return state.update_service(service_id, body.model_dump(exclude_unset=True))


@router.delete("/services/{service_id}")
def delete_service(service_id: str, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    state.delete_service(service_id)
    return {"status": "ok"}


@router.get("/products")
def list_products(q: Optional[str] = None, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    return state.products.search(q) if q else state.products.get_all()


@router.post("/products")
def create_product(body: ProductCreate, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    return state.add_product(body.model_dump())


@router.patch("/products/{product_id}")
def update_product(
    product_id: str,
    body: ProductUpdate,
    actor: User = Depends(get_actor),
    state: AppState = Depends(get_state)
):
    return state.update_product(product_id, body.model_dump(exclude_unset=True))


@router.delete("/products/{product_id}")
def delete_product(product_id: str, actor: User = Depends(get_actor), state: AppState = Depends(get_state)):
    state.delete_product(product_id)
    return {"status": "ok"}
