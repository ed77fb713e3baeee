from typing import Optional

from pydantic import BaseModel

from alphaflow.models import CartItemType, PaymentMethod


class CartAdd(BaseModel):
    item_id: str
    item_type: CartItemType


class CartQuantity(BaseModel):
    delta: int


class CartClient(BaseModel):
    client_id: Optional[str] = None


class FinalizeRequest(BaseModel):
    payment_method: PaymentMethod
